import importlib.util
import itertools
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def load_module(script_path, module_name="module"):
    spec = importlib.util.spec_from_file_location(module_name, str(script_path))
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    logger.debug(f"Loaded module {module_name} from {Path(script_path)}")
    return module


def incrf(start: int = 1):
    """Endless counter used to hand out sequential ids."""
    return itertools.count(start)


def prefixed_ids(prefix: str, start: int = 1):
    counter = incrf(start)
    while True:
        yield f"{prefix}_{next(counter)}"
