"""
Tests for the rule-parsing collaborators.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from roi_taskflow.core.tasks import AlarmLevel
from roi_taskflow.services.rules import (
    AMBIGUOUS_REASON,
    GENERIC_FAILURE_REASON,
    LiteLLMRuleParser,
    ParsedRule,
    SimulatedRuleParser,
    build_rule_parser,
    parse_rule_safely,
)
from roi_taskflow.tests.helpers import StaticRuleParser, valid_rule
from roi_taskflow.utils.config import DEFAULT_CONFIG


def completion(content, finish_reason="stop"):
    return {"choices": [{"message": {"content": content}, "finish_reason": finish_reason}]}


def fake_translation(message):
    return "translated: " + message


class TestSimulatedParser:
    """Tests for the offline parser."""

    def test_returns_mock_rule(self):
        """Test the canned rule echoes the text."""
        result = asyncio.run(SimulatedRuleParser(delay=0).parse("people running"))

        assert result.valid
        assert result.object_name == "Mock Object"
        assert result.action_description == "people running"
        assert result.suggested_duration == 3
        assert result.suggested_level is AlarmLevel.HIGH

    def test_delay_follows_config(self):
        """Test default delay comes from the default configuration."""
        assert SimulatedRuleParser().delay == DEFAULT_CONFIG["rules"]["simulated_delay"]


class TestLiteLLMParser:
    """Tests for the model-backed parser with a mocked completion."""

    def test_parses_noisy_json(self):
        """Test JSON is extracted from surrounding text."""
        content = (
            'Here you go: {"object_name": "Person", "action_description": "Smoking", '
            '"suggested_duration": 5, "suggested_level": "low", "valid": true}'
        )
        mock = AsyncMock(return_value=completion(content))
        with patch("roi_taskflow.services.rules.litellm.acompletion", mock):
            result = asyncio.run(LiteLLMRuleParser("test/model").parse("smoking"))

        assert result.valid
        assert result.object_name == "Person"
        assert result.suggested_level is AlarmLevel.LOW
        assert mock.call_args.kwargs["model"] == "test/model"
        assert mock.call_args.kwargs["response_format"] == {"type": "json_object"}

    def test_timeout_follows_config(self):
        """Test default timeout comes from the default configuration."""
        assert LiteLLMRuleParser("test/model").timeout == DEFAULT_CONFIG["rules"]["timeout"]

    def test_schema_mismatch_becomes_generic_failure(self):
        """Test a reply of the wrong shape."""
        mock = AsyncMock(return_value=completion('{"valid": "maybe"}'))
        with patch("roi_taskflow.services.rules.litellm.acompletion", mock):
            result = asyncio.run(
                parse_rule_safely(LiteLLMRuleParser("test/model"), "smoking")
            )

        assert not result.valid
        assert result.reason == GENERIC_FAILURE_REASON

    def test_empty_content_becomes_generic_failure(self):
        """Test an empty reply."""
        mock = AsyncMock(return_value=completion("", finish_reason="length"))
        with patch("roi_taskflow.services.rules.litellm.acompletion", mock):
            result = asyncio.run(
                parse_rule_safely(LiteLLMRuleParser("test/model"), "smoking")
            )

        assert result.reason == GENERIC_FAILURE_REASON


class TestParseSafely:
    """Tests for failure mapping around any parser."""

    def test_valid_passthrough(self):
        """Test a valid result is returned as is."""
        rule = valid_rule()
        assert asyncio.run(parse_rule_safely(StaticRuleParser(rule), "x")) is rule

    def test_exception_maps_to_failure(self):
        """Test a raised timeout becomes an invalid result."""
        result = asyncio.run(
            parse_rule_safely(StaticRuleParser(asyncio.TimeoutError()), "people smoking")
        )

        assert not result.valid
        assert result.reason == GENERIC_FAILURE_REASON
        assert result.object_name == "Unknown"
        assert result.action_description == "people smoking"
        assert result.suggested_duration == 0
        assert result.suggested_level is AlarmLevel.MEDIUM

    def test_invalid_without_reason_gets_one(self):
        """Test an invalid result gets the ambiguity reason."""
        result = asyncio.run(
            parse_rule_safely(StaticRuleParser(valid_rule(valid=False)), "x")
        )
        assert result.reason == AMBIGUOUS_REASON

    def test_invalid_reason_is_kept(self):
        """Test a given reason is not replaced."""
        result = asyncio.run(
            parse_rule_safely(StaticRuleParser(valid_rule(valid=False, reason="No")), "x")
        )
        assert result.reason == "No"


class TestReasonTranslation:
    """Tests for translating reasons when results are built."""

    def test_failure_reason_uses_active_translation(self):
        """Test the generic reason is translated at call time."""
        with patch("roi_taskflow.services.rules._", fake_translation):
            result = ParsedRule.failure("people smoking")

        assert result.reason == "translated: " + GENERIC_FAILURE_REASON

    def test_ambiguous_reason_uses_active_translation(self):
        """Test the ambiguity reason is translated at call time."""
        parser = StaticRuleParser(valid_rule(valid=False))
        with patch("roi_taskflow.services.rules._", fake_translation):
            result = asyncio.run(parse_rule_safely(parser, "x"))

        assert result.reason == "translated: " + AMBIGUOUS_REASON

    def test_collaborator_failure_uses_active_translation(self):
        """Test a raising parser yields the translated generic reason."""
        parser = StaticRuleParser(ConnectionError("boom"))
        with patch("roi_taskflow.services.rules._", fake_translation):
            result = asyncio.run(parse_rule_safely(parser, "x"))

        assert result.reason == "translated: " + GENERIC_FAILURE_REASON


class TestBuildParser:
    """Tests for choosing a parser from configuration."""

    def test_simulated_by_default(self, config):
        """Test simulation is the default."""
        assert isinstance(build_rule_parser(config), SimulatedRuleParser)

    def test_model_when_not_simulated(self, config):
        """Test a configured model is used."""
        config.rules.simulate = False
        parser = build_rule_parser(config)

        assert isinstance(parser, LiteLLMRuleParser)
        assert parser.model == config.rules.model

    @pytest.mark.parametrize("model", ["", None])
    def test_no_model_falls_back_to_simulation(self, config, model):
        """Test a missing model falls back to simulation."""
        config.rules.simulate = False
        config.rules.model = model
        assert isinstance(build_rule_parser(config), SimulatedRuleParser)
