import roi_taskflow.utils.i18n  # noqa: F401

"""Command line entry point of roi_taskflow.

Each sub-package of ``roi_taskflow.cli`` is a subcommand exposing
``COMMAND_DESCRIPTION`` and ``command(subparser)``; ``command`` registers
its flags and returns the handler called with the parsed arguments.
"""

import logging
import sys
from argparse import ArgumentDefaultsHelpFormatter, ArgumentParser
from gettext import gettext as _
from pathlib import Path
from typing import Dict, List, Optional

from roi_taskflow.utils.i18n import set_language
from roi_taskflow.utils.misc import load_module

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def discover_subcommands(root: Path = Path(__file__).parent) -> Dict[str, object]:
    """Load every subcommand package below ``root``, keyed by name."""
    found = {}
    for init in sorted(root.glob("*/__init__.py")):
        name = init.parent.name
        if name.startswith("_"):
            continue
        found[name] = load_module(init, module_name=f"roi_taskflow.cli.{name}")
    return found


def common_flags(parser):
    parser.add_argument(
        "-v",
        "--verbose",
        dest="verbose",
        action="store_true",
        help=_("Give more details about what is happening"),
    )
    parser.add_argument(
        "-V",
        "--version",
        dest="is_show_version",
        action="store_true",
        help=_("Print version and exit"),
    )
    parser.add_argument(
        "--lang",
        dest="language",
        default=None,
        help=_("Language of the messages, e.g. pt_BR"),
    )


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="roi_taskflow", formatter_class=ArgumentDefaultsHelpFormatter
    )
    common_flags(parser)
    subparsers = parser.add_subparsers()
    for name, submodule in discover_subcommands().items():
        subparser = subparsers.add_parser(name, help=submodule.COMMAND_DESCRIPTION)
        common_flags(subparser)
        subparser.set_defaults(fn=submodule.command(subparser))
    return parser


def read_version() -> str:
    return (Path(__file__).parent.parent / "VERSION").read_text().strip()


def main(argv: Optional[List[str]] = None):  # pragma: no cover
    """Run ``python -m roi_taskflow`` / ``roi_taskflow``."""
    logging.basicConfig(format=LOG_FORMAT)
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.root.setLevel(logging.DEBUG)
    set_language(args.language)

    version = read_version()
    if args.is_show_version:
        print(version)
        sys.exit(0)
    logger.debug(f"{_('Starting')} roi_taskflow v{version}")

    fn = getattr(args, "fn", None)
    if fn is None:
        parser.print_help()
        sys.exit(1)
    fn(args)
