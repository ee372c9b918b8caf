import roi_taskflow.utils.i18n  # noqa:F401

from easydict import EasyDict as edict

from .config import get_config
from .env import load_cfg_from_env


def test_load_cfg_from_env():
    """Test prefixed variables are nested into the config."""
    input_dict = {"TASKFLOW_a": 2, "TASKFLOW_lifecycle__training_delay": 3, "OTHER_b": 1}
    loaded = load_cfg_from_env(edict(), input_dict)
    assert loaded.a == 2
    assert loaded.lifecycle.training_delay == 3
    assert "b" not in loaded


def test_values_follow_default_types():
    """Test string values are cast to the default types."""
    cfg = get_config(
        env={
            "TASKFLOW_LIFECYCLE__PROVISIONING_DELAY": "0.5",
            "TASKFLOW_SAMPLES__POSITIVE_THRESHOLD": "4",
            "TASKFLOW_RULES__SIMULATE": "false",
            "TASKFLOW_RULES__MODEL": "openai/gpt-4o-mini",
        }
    )
    assert cfg.lifecycle.provisioning_delay == 0.5
    assert cfg.samples.positive_threshold == 4
    assert isinstance(cfg.samples.positive_threshold, int)
    assert cfg.rules.simulate is False
    assert cfg.rules.model == "openai/gpt-4o-mini"


def test_defaults_are_not_shared():
    """Test each config is a fresh copy of the defaults."""
    cfg = get_config(env={})
    cfg.samples.mock_count = 1
    assert get_config(env={}).samples.mock_count == 50
