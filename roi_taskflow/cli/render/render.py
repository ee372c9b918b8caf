import json
import logging
from gettext import gettext as _

import cv2
import numpy as np

from roi_taskflow.core.annotation import (
    Primitive,
    overlay_to_svg,
    rasterize_overlay,
    render_overlay,
)
from roi_taskflow.utils.config import get_config

logger = logging.getLogger(__name__)


def load_primitives(data):
    """Accept a bare primitive list or a serialized task."""
    if isinstance(data, dict):
        data = data.get("roi_primitives", [])
    return [Primitive.from_dict(item) for item in data]


def handle(args):
    cfg = get_config()
    primitives = load_primitives(json.loads(args.input.read_text()))
    shapes = render_overlay(
        primitives,
        head_length=float(cfg.canvas.arrow_head_length),
        scale=float(cfg.canvas.overlay_scale),
    )
    logger.info(
        _("Rendering {n} primitives to {output}").format(
            n=len(primitives), output=args.output
        )
    )

    if args.output.suffix.lower() == ".svg":
        args.output.write_text(overlay_to_svg(shapes, scale=float(cfg.canvas.overlay_scale)))
        return

    if args.image is not None:
        image = cv2.imread(str(args.image), cv2.IMREAD_COLOR)
        if image is None:
            raise FileNotFoundError(args.image)
        image = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    else:
        image = np.zeros((args.height, args.width, 3), dtype=np.uint8)

    vis = rasterize_overlay(
        shapes, image, scale=float(cfg.canvas.overlay_scale), colormap=args.colormap
    )
    cv2.imwrite(str(args.output), cv2.cvtColor(vis, cv2.COLOR_RGB2BGR))
