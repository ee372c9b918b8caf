import asyncio
import json
import logging

from roi_taskflow.core.annotation import PrimitiveKind
from roi_taskflow.core.curation import LabelStatus, generate_samples
from roi_taskflow.core.errors import ConfirmationRequired
from roi_taskflow.core.tasks import AsyncioScheduler, Camera, ManualScheduler
from roi_taskflow.core.workspace import Workspace
from roi_taskflow.interfaces import PointerCanvasAdapter
from roi_taskflow.services import build_rule_parser
from roi_taskflow.utils.config import get_config

logger = logging.getLogger(__name__)

DEMO_CAMERAS = [
    Camera("cam1", "Gate 1 entrance", "Gate 1", online=True),
    Camera("cam2", "Warehouse B hazardous goods", "Warehouse B", online=True),
    Camera("cam3", "Office lobby", "Lobby", online=False),
    Camera("cam4", "Parking west", "Parking West", online=True),
]

PREVIEW_SIZE = (800, 450)
SQUARE = [(0.1, 0.1), (0.4, 0.1), (0.4, 0.4), (0.1, 0.4)]


def draw_region(adapter: PointerCanvasAdapter, kind: PrimitiveKind):
    width, height = PREVIEW_SIZE
    adapter.canvas.set_kind(kind)
    first, *rest = SQUARE
    adapter.pointer_down(first[0] * width, first[1] * height)
    for x, y in rest:
        adapter.pointer_move(x * width, y * height)
    adapter.pointer_up()


async def run_demo(args, workspace: Workspace, wait):
    cfg = workspace.cfg
    wizard = workspace.open_wizard()
    wizard.toggle_camera("cam2")
    wizard.select_algorithm(args.algorithm)

    if args.rule:
        wizard.set_augmentation_text(args.rule)
        result = await wizard.parse_augmentation(build_rule_parser(cfg))
        if not result.valid:
            logger.error(f"Rule rejected: {wizard.augmentation_error}")
            return None

    if not args.full_frame:
        adapter = PointerCanvasAdapter(wizard.canvas, *PREVIEW_SIZE)
        draw_region(adapter, PrimitiveKind(args.kind))

    try:
        task = workspace.save_wizard()
    except ConfirmationRequired as e:
        logger.info(str(e))
        task = workspace.confirm(e.token)

    await wait(float(cfg.lifecycle.provisioning_delay))
    logger.info(f"Task {task.id} is {workspace.lifecycle.get(task.id).status.value}")

    samples = generate_samples(
        int(cfg.samples.mock_count),
        seed=args.seed,
        min_confidence=float(cfg.samples.min_confidence),
        max_confidence=float(cfg.samples.max_confidence),
    )
    store = workspace.open_curation(task.id, samples)
    ranked = sorted(store.samples, key=lambda s: s.confidence, reverse=True)
    positives = ranked[: store.positive_threshold]
    negatives = ranked[len(ranked) - store.negative_threshold :]
    for sample in positives:
        store.label(sample.id, LabelStatus.POSITIVE)
    for sample in negatives:
        store.label(sample.id, LabelStatus.NEGATIVE)

    token = workspace.propose_training(task.id)
    logger.info(workspace.gate.describe(token).message)
    workspace.confirm(token)

    await wait(float(cfg.lifecycle.training_delay))
    return workspace.lifecycle.get(task.id)


def handle(args):
    cfg = get_config()

    async def realtime():
        workspace = Workspace(DEMO_CAMERAS, AsyncioScheduler(), cfg)

        async def wait(seconds):
            await asyncio.sleep(seconds + 0.05)

        return await run_demo(args, workspace, wait)

    async def simulated():
        scheduler = ManualScheduler()
        workspace = Workspace(DEMO_CAMERAS, scheduler, cfg)

        async def wait(seconds):
            scheduler.advance(seconds)

        return await run_demo(args, workspace, wait)

    task = asyncio.run(realtime() if args.realtime else simulated())
    if task is not None:
        print(json.dumps(task.to_dict(), indent=2))
