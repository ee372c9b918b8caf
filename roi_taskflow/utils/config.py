"""
Default configuration for roi_taskflow.

Values can be overridden from the environment, see ``env.load_cfg_from_env``.
"""

import copy
import os
from typing import Dict, Optional

from easydict import EasyDict as edict

from .env import load_cfg_from_env

DEFAULT_CONFIG = {
    "lifecycle": {
        # INIT -> RUNNING
        "provisioning_delay": 2.0,
        # TRAINING -> RUNNING, roughly five minutes of fine-tuning
        "training_delay": 300.0,
    },
    "canvas": {
        "arrow_head_length": 2.0,
        "overlay_scale": 100.0,
    },
    "samples": {
        "positive_threshold": 20,
        "negative_threshold": 10,
        "mock_count": 50,
        "min_confidence": 0.4,
        "max_confidence": 0.9,
    },
    "wizard": {
        "name_max_length": 50,
    },
    "rules": {
        # switch off to send descriptions to the model below
        "simulate": True,
        "model": "gemini/gemini-2.5-flash",
        "timeout": 30.0,
        "simulated_delay": 1.0,
    },
}


def get_config(env: Optional[Dict[str, str]] = None) -> edict:
    """Build the configuration tree, applying ``TASKFLOW_*`` overrides."""
    cfg = edict(copy.deepcopy(DEFAULT_CONFIG))
    if env is None:
        env = dict(os.environ)
    return load_cfg_from_env(cfg, env)
