from __future__ import annotations

"""
Lint configuration: which rules run, at what severity, and which extra names
are treated as function-like macros.

Everything the CLI can change lives on Config; rules read only what they need
and must work with config=None.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Mapping, Sequence

from condlint.findings.models import SEVERITIES, Finding
from condlint.rules.base import RULES, Rule, get_rule_class
from condlint.rules.ifs_in_if_conditions import IfsInIfConditionsRule
from condlint.syntax import DEFAULT_MACRO_NAMES

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """
    Scanner configuration.

    Attributes:
        rules: Rule instances to run.
        disabled_rules: Rule ids switched off (e.g. from --disable).
        severity_overrides: rule id -> severity replacing the rule's default.
        macro_names: Extra function-like macro names, on top of those each
            file #defines itself.
        include_headers: Also scan .h files when given a directory.
    """

    rules: Sequence[Rule] = field(default_factory=list)
    disabled_rules: frozenset[str] = frozenset()
    severity_overrides: Mapping[str, str] = field(default_factory=dict)
    macro_names: frozenset[str] = DEFAULT_MACRO_NAMES
    include_headers: bool = False


def get_default_config() -> Config:
    """Return a configuration with every implemented rule enabled."""
    rules: List[Rule] = [
        IfsInIfConditionsRule(),
    ]
    return Config(rules=rules)


def get_enabled_rules(config: Config | None = None) -> Sequence[Rule]:
    """Return the rules of config (or the default config) that are not disabled."""
    if config is None:
        config = get_default_config()
    return [rule for rule in config.rules if rule.id not in config.disabled_rules]


def parse_severity_override(value: str) -> tuple[str, str]:
    """
    Parse a ``RULE=LEVEL`` string into (rule id, severity).

    Raises:
        ValueError: if the string is malformed, the rule is unknown or the
            level is not one of SEVERITIES.
    """
    rule_id, sep, level = value.partition("=")
    rule_id, level = rule_id.strip(), level.strip().lower()
    if not sep or not rule_id or not level:
        raise ValueError(f"Expected RULE=LEVEL, got {value!r}")
    if rule_id not in RULES:
        raise ValueError(f"Unknown rule id {rule_id!r}")
    if level not in SEVERITIES:
        raise ValueError(f"Unknown severity {level!r}; choose from {', '.join(SEVERITIES)}")
    return rule_id, level


def build_config(
    disabled: Iterable[str] = (),
    severities: Iterable[str] = (),
    macros: Iterable[str] = (),
    include_headers: bool = False,
) -> Config:
    """
    Build a Config from CLI-style values on top of the defaults.

    Raises:
        KeyError: a disabled rule id is not registered.
        ValueError: a severity override is malformed.
    """
    config = get_default_config()
    disabled_ids = frozenset(disabled)
    for rule_id in disabled_ids:
        get_rule_class(rule_id)
    overrides = dict(parse_severity_override(s) for s in severities)
    config.disabled_rules = disabled_ids
    config.severity_overrides = overrides
    config.macro_names = DEFAULT_MACRO_NAMES | frozenset(macros)
    config.include_headers = include_headers
    logger.debug(
        "Config: disabled=%s, severity_overrides=%s, macro_names=%s, include_headers=%s",
        sorted(disabled_ids),
        overrides,
        sorted(config.macro_names),
        include_headers,
    )
    return config


def apply_severity(finding: Finding, config: Config | None) -> Finding:
    """Return finding with its severity replaced if config overrides its rule."""
    if config is None:
        return finding
    level = config.severity_overrides.get(finding.rule_id)
    if level is None or level == finding.severity:
        return finding
    return finding.model_copy(update={"severity": level})
