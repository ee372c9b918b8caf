"""
External collaborators used by the task wizard.
"""

from .rules import (
    LiteLLMRuleParser,
    ParsedRule,
    RuleParser,
    SimulatedRuleParser,
    build_rule_parser,
    parse_rule_safely,
)

__all__ = [
    "LiteLLMRuleParser",
    "ParsedRule",
    "RuleParser",
    "SimulatedRuleParser",
    "build_rule_parser",
    "parse_rule_safely",
]
