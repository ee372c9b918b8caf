# flake8: noqa E501

from gettext import gettext as _
from pathlib import Path

COMMAND_DESCRIPTION = _("Render a list of primitives to SVG or PNG")


def command(subparser):
    subparser.add_argument(
        "input", type=Path, help=_("JSON file with a list of primitives, or a saved task")
    )
    subparser.add_argument("output", type=Path, help=_("Output .svg or .png file"))
    subparser.add_argument(
        "-i", "--image", dest="image", type=Path, help=_("Frame to draw the overlay on (PNG only)")
    )
    subparser.add_argument("--width", type=int, default=800)
    subparser.add_argument("--height", type=int, default=450)
    subparser.add_argument(
        "-c", "--colormap", dest="colormap", default=None, help=_("Matplotlib colormap name")
    )

    def handle(args):
        from .render import handle as render_handle

        render_handle(args)

    return handle
