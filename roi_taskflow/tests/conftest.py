"""
Test fixtures for roi_taskflow tests.

Provides reusable fixtures for cameras, schedulers, canvases and tasks.
Plain helpers live in ``roi_taskflow.tests.helpers``.
"""

from datetime import date

import pytest

from roi_taskflow.core.annotation import AnnotationCanvas, PrimitiveKind
from roi_taskflow.core.curation import Sample
from roi_taskflow.core.tasks import (
    Camera,
    CameraDirectory,
    ManualScheduler,
    TaskDraftBuilder,
    TaskLifecycleManager,
)
from roi_taskflow.core.workspace import Workspace
from roi_taskflow.tests.helpers import SQUARE
from roi_taskflow.utils.config import get_config


@pytest.fixture
def cameras():
    """Two online cameras and an offline one."""
    return [
        Camera("cam1", "Gate 1 entrance", "Gate 1", online=True),
        Camera("cam2", "Warehouse B", "Warehouse B", online=True),
        Camera("cam3", "Office lobby", "Lobby", online=False),
    ]


@pytest.fixture
def camera_directory(cameras):
    return CameraDirectory(cameras)


@pytest.fixture
def scheduler():
    """Virtual clock, advanced explicitly by each test."""
    return ManualScheduler()


@pytest.fixture
def config():
    """Defaults only, unaffected by the developer's environment."""
    return get_config(env={})


@pytest.fixture
def canvas():
    return AnnotationCanvas(kind=PrimitiveKind.POLYGON)


@pytest.fixture
def square():
    """Axis-aligned square ROI, in drawing order."""
    return list(SQUARE)


@pytest.fixture
def builder(camera_directory):
    """Wizard session with small thresholds and a fixed date."""
    return TaskDraftBuilder(
        camera_directory,
        positive_threshold=3,
        negative_threshold=2,
        today=lambda: date(2026, 10, 19),
    )


@pytest.fixture
def lifecycle(scheduler):
    return TaskLifecycleManager(scheduler, provisioning_delay=2.0, training_delay=300.0)


@pytest.fixture
def workspace(cameras, scheduler, config):
    return Workspace(cameras, scheduler, config)


@pytest.fixture
def samples():
    """Ten unlabeled samples."""
    return [Sample(id=f"sample_{i}", confidence=0.5) for i in range(10)]
