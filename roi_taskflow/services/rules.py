"""
Rule-parsing collaborators.

Turn a free-text description ("detect people smoking near the tanks") into
a structured rule. Callers go through ``parse_rule_safely`` so that any
transport failure looks exactly like an invalid description.
"""

import asyncio
import json
import logging
from dataclasses import dataclass, replace
from gettext import gettext as _
from typing import Any, Dict, Literal, Optional, Tuple

import litellm
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..core.tasks.models import AlarmLevel
from ..utils.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

# Catalog ids, translated where a result is built so the active language applies
GENERIC_FAILURE_REASON = "API Error or Timeout"
AMBIGUOUS_REASON = "The description is ambiguous, please rephrase it"


@dataclass(frozen=True)
class ParsedRule:
    object_name: str
    action_description: str
    suggested_duration: float
    suggested_level: AlarmLevel
    valid: bool
    reason: Optional[str] = None

    @classmethod
    def failure(cls, text: str, reason: Optional[str] = None) -> "ParsedRule":
        if reason is None:
            reason = _(GENERIC_FAILURE_REASON)
        return cls(
            object_name="Unknown",
            action_description=text,
            suggested_duration=0,
            suggested_level=AlarmLevel.MEDIUM,
            valid=False,
            reason=reason,
        )


class RuleParser:
    """Contract of a rule-parsing collaborator."""

    async def parse(self, text: str) -> ParsedRule:
        raise NotImplementedError


class SimulatedRuleParser(RuleParser):
    """Offline stand-in used when no model is configured."""

    def __init__(self, delay: float = DEFAULT_CONFIG["rules"]["simulated_delay"]):
        self.delay = delay

    async def parse(self, text: str) -> ParsedRule:
        logger.warning("No rule model configured, returning a simulated rule")
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return ParsedRule(
            object_name="Mock Object",
            action_description=text,
            suggested_duration=3,
            suggested_level=AlarmLevel.HIGH,
            valid=True,
        )


class _RuleOut(BaseModel):
    model_config = ConfigDict(extra="ignore")

    object_name: str
    action_description: str
    suggested_duration: float = Field(ge=0.0)
    suggested_level: Literal["HIGH", "MEDIUM", "LOW"]
    valid: bool
    reason: Optional[str] = None

    @field_validator("suggested_level", mode="before")
    @classmethod
    def _upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v


_PROMPT = """
Parse the following video analytics request into a structured configuration: "{text}".
If the request is vague or impossible to visualize, set valid to false and give a reason.

Output strictly as JSON, no extra text, matching this shape:
{schema}
""".strip()

_SCHEMA_HINT = {
    "object_name": "The main object to detect, e.g. 'Person', 'Car'",
    "action_description": "The action or state, e.g. 'Smoking', 'Running'",
    "suggested_duration": "Trigger duration in seconds, 0 if immediate",
    "suggested_level": "HIGH | MEDIUM | LOW",
    "valid": "true if the request is clear and viable",
    "reason": "Why the request is invalid, if it is",
}


def _extract_json(text: str) -> str:
    """Extract a JSON object from a possibly noisy model response."""
    if not text:
        return text
    i = text.find("{")
    j = text.rfind("}")
    if i != -1 and j > i:
        return text[i : j + 1]
    return text


def _response_to_dict(resp: Any) -> Dict[str, Any]:
    """Normalize a LiteLLM completion response object to a plain dict."""
    if isinstance(resp, dict):
        return resp
    if isinstance(resp, BaseModel):
        return resp.model_dump()
    raise TypeError(f"Unsupported completion response type: {type(resp)!r}")


def _extract_choice_text(resp: Dict[str, Any]) -> Tuple[str, str]:
    """Extract assistant content and finish_reason from a Chat Completions response."""
    choices = resp.get("choices") or []
    if not isinstance(choices, list) or not choices:
        return "", ""
    c0 = choices[0] or {}
    finish_reason = str(c0.get("finish_reason") or "")
    msg = c0.get("message") or {}
    content = msg.get("content") if isinstance(msg, dict) else None
    return (content or "").strip(), finish_reason


class LiteLLMRuleParser(RuleParser):
    """Ask a chat model, through LiteLLM, to structure the description."""

    def __init__(
        self,
        model: str,
        timeout: float = DEFAULT_CONFIG["rules"]["timeout"],
        temperature: float = 0.0,
    ):
        self.model = model
        self.timeout = timeout
        self.temperature = temperature

    async def parse(self, text: str) -> ParsedRule:
        prompt = _PROMPT.format(text=text, schema=json.dumps(_SCHEMA_HINT, indent=2))
        logger.info("Requesting rule parsing via LiteLLM: model=%s", self.model)
        raw_resp = await litellm.acompletion(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
            temperature=self.temperature,
            timeout=self.timeout,
        )
        content, finish_reason = _extract_choice_text(_response_to_dict(raw_resp))
        if not content:
            raise RuntimeError(
                f"Rule model returned empty content, finish_reason={finish_reason!r}"
            )

        try:
            out = _RuleOut.model_validate_json(_extract_json(content))
        except ValidationError as e:
            raise RuntimeError("Rule model output does not match expected schema.") from e

        return ParsedRule(
            object_name=out.object_name,
            action_description=out.action_description,
            suggested_duration=out.suggested_duration,
            suggested_level=AlarmLevel(out.suggested_level),
            valid=out.valid,
            reason=out.reason,
        )


async def parse_rule_safely(parser: RuleParser, text: str) -> ParsedRule:
    """
    Await the collaborator once, mapping every failure to an invalid rule.

    Invalid results without a reason get a generic fallback reason.
    """
    try:
        result = await parser.parse(text)
    except Exception as e:
        logger.warning(f"Rule parsing failed: {e}")
        return ParsedRule.failure(text)

    if not result.valid and not result.reason:
        return replace(result, reason=_(AMBIGUOUS_REASON))
    return result


def build_rule_parser(cfg) -> RuleParser:
    """Pick the collaborator from configuration: a model name enables LiteLLM."""
    model = cfg.rules.get("model")
    if cfg.rules.get("simulate", True) or not model:
        return SimulatedRuleParser(delay=float(cfg.rules.simulated_delay))
    return LiteLLMRuleParser(model=model, timeout=float(cfg.rules.timeout))
