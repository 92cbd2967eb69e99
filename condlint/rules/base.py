# Rule interface (abstract base class) and the registry of available rules.
# Concrete rules subclass Rule, set their metadata and implement run().

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from condlint.findings.models import Finding


class Rule(ABC):
    """
    Abstract base class for all lint rules.

    Subclasses must define:
    - id: str, unique rule identifier (e.g. "ifs-in-if-conditions")
    - name: str, human-readable rule name
    - category: str, lint group; also the default severity of its findings
    - description: str, one-line summary shown by ``condlint rules``
    - run(context, config) -> list[Finding], analyze one file

    The CLI calls run() once per file; context holds path, source bytes, tree
    and macro names.
    """

    id: str
    name: str
    category: str = "style"
    description: str = ""

    @abstractmethod
    def run(self, context: Any, config: Any) -> list[Finding]:
        """
        Analyze one file and return any findings.

        Args:
            context: FileContext for the file (see condlint.context).
            config: Config in effect, or None for defaults. Rules must not
                depend on it being present.

        Returns:
            Findings in document order; empty if the file is clean.
        """
        ...


RULES: dict[str, type[Rule]] = {}


def register(rule_cls: type[Rule]) -> type[Rule]:
    """Class decorator adding a rule to RULES under its id."""
    if rule_cls.id in RULES:
        raise ValueError(f"Duplicate rule id: {rule_cls.id}")
    RULES[rule_cls.id] = rule_cls
    return rule_cls


def get_rule_class(rule_id: str) -> type[Rule]:
    """Return the registered rule class for rule_id, or raise KeyError."""
    try:
        return RULES[rule_id]
    except KeyError:
        known = ", ".join(sorted(RULES)) or "none"
        raise KeyError(f"Unknown rule id {rule_id!r} (known: {known})") from None
