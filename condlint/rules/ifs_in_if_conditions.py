# Conditionals in conditional conditions: flags `if ((x ? a : b) > 5)` and
# friends, where the inner conditional is better assigned to a variable first.

from __future__ import annotations

import enum
import logging
from typing import Any

from tree_sitter import Node as TSNode

from condlint.context import FileContext, get_location
from condlint.findings.models import Finding
from condlint.rules.base import Rule, register
from condlint.syntax import (
    Conditional,
    MacroExpansion,
    children_for_generic_walk,
    classify,
    function_bodies,
    function_name,
)

logger = logging.getLogger(__name__)

RULE_ID = "ifs-in-if-conditions"
MESSAGE = "conditional expression in conditional condition"
HELP = "assign the result of the inner conditional to a variable and use the variable in the condition instead"


class ConditionContext(enum.Enum):
    """Where the node being visited sits relative to enclosing conditionals."""

    # Ordinary code: a function body, a then-branch or an else-branch
    OUTER = "outer"
    # Somewhere under the condition of a conditional, with no then/else body in between
    INSIDE_CONDITION = "inside-condition"


class IfConditionVisitor:
    """
    Walk one function body and collect a finding for every conditional that
    sits inside the condition of another conditional.

    One visitor is created per function body. The condition context is passed
    down through each recursive call rather than stored on the visitor, so a
    child can never change what its siblings or parent see.
    """

    def __init__(self, context: FileContext, rule_id: str = RULE_ID, severity: str = "style") -> None:
        self.context = context
        self.rule_id = rule_id
        self.severity = severity
        self.findings: list[Finding] = []

    def visit(self, node: TSNode, ctx: ConditionContext = ConditionContext.OUTER) -> None:
        kind = classify(node, self.context.source, self.context.macro_names)

        if isinstance(kind, MacroExpansion):
            # The macro body is not in the tree; the arguments are user code.
            logger.debug("Macro invocation %s() at %s, walking arguments only", kind.name, node.start_point)
            for arg in kind.arguments:
                self.visit(arg, ctx)
            return

        if isinstance(kind, Conditional):
            if ctx is ConditionContext.INSIDE_CONDITION:
                self._report(node)
            self._walk_condition(kind.condition)
            # Then and else bodies are ordinary code again.
            if kind.then_branch is not None:
                self.visit(kind.then_branch, ConditionContext.OUTER)
            if kind.else_branch is not None:
                self.visit(kind.else_branch, ConditionContext.OUTER)
            return

        for child in kind.children:
            self.visit(child, ctx)

    def _walk_condition(self, condition: TSNode) -> None:
        """Descend into the children of a condition slot; the slot node itself is not re-dispatched."""
        kind = classify(condition, self.context.source, self.context.macro_names)
        if isinstance(kind, MacroExpansion):
            logger.debug("Macro invocation %s() used as condition, walking arguments only", kind.name)
            children = kind.arguments
        else:
            children = children_for_generic_walk(condition)
        for child in children:
            self.visit(child, ConditionContext.INSIDE_CONDITION)

    def _report(self, node: TSNode) -> None:
        location = get_location(self.context, node)
        logger.debug("Conditional in condition at %s:%d:%d", location.path, location.line, location.column)
        self.findings.append(
            Finding(
                rule_id=self.rule_id,
                message=MESSAGE,
                help=HELP,
                location=location,
                severity=self.severity,
            )
        )


def check_function_body(context: FileContext, body: TSNode, severity: str = "style") -> list[Finding]:
    """Run a fresh visitor over one function body and return its findings."""
    visitor = IfConditionVisitor(context, severity=severity)
    visitor.visit(body)
    return visitor.findings


@register
class IfsInIfConditionsRule(Rule):
    """
    Detects conditionals (``if`` or ``?:``) used in the condition of another
    conditional, e.g. ``if ((a == 13 ? 10 : 0) > 5)``.

    Calls to function-like macros keep their callee opaque: the expansion is
    not part of the tree. Their arguments are user code and are checked in
    the context the call appears in.
    """

    id = RULE_ID
    name = "Conditional in conditional condition"
    category = "style"
    description = "checks for `if` or `?:` expressions in the conditions of `if`/`else if`/`?:` expressions"

    def run(self, context: Any, config: Any) -> list[Finding]:
        findings: list[Finding] = []
        functions = 0
        for func, body in function_bodies(context.root_node):
            functions += 1
            found = check_function_body(context, body, severity=self.category)
            if found:
                logger.debug(
                    "%s: %d finding(s) in function %s",
                    context.path,
                    len(found),
                    function_name(func, context.source) or "<anonymous>",
                )
            findings.extend(found)
        logger.info("%s: %d function(s) checked, %d finding(s)", context.path, functions, len(findings))
        return findings
