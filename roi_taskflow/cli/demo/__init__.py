# flake8: noqa E501

from gettext import gettext as _

COMMAND_DESCRIPTION = _("Run a simulated task: draw, save, provision, curate and train")


def command(subparser):
    subparser.add_argument(
        "-k",
        "--kind",
        dest="kind",
        default="polygon",
        choices=["segment", "curve", "polygon", "arrow"],
        help=_("Primitive kind used to draw the region"),
    )
    subparser.add_argument(
        "-a", "--algorithm", dest="algorithm", default="smoking", help=_("Preset algorithm id")
    )
    subparser.add_argument(
        "-r", "--rule", dest="rule", default=None, help=_("Optional free-text refinement")
    )
    subparser.add_argument(
        "--full-frame",
        dest="full_frame",
        action="store_true",
        help=_("Skip drawing and accept full-frame detection"),
    )
    subparser.add_argument(
        "--realtime",
        action="store_true",
        help=_("Wait for the simulated delays on the asyncio loop instead of a virtual clock"),
    )
    subparser.add_argument("--seed", dest="seed", type=int, default=0)

    def handle(args):
        from .demo import handle as demo_handle

        demo_handle(args)

    return handle
