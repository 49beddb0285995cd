"""Shared contract for selection rules."""

import logging
import uuid
from abc import ABC, abstractmethod
from collections.abc import Sequence, Set
from typing import Any, ClassVar, assert_never

from ...core.models import Entry
from ..models import (
    RuleConfigModel,
    RuleContext,
    RuleResult,
    RuleType,
    SelectionAction,
    ValidationResult,
)

logger = logging.getLogger(__name__)


class RuleIdAllocator:
    """Hands out readable, reproducible rule ids such as ``group-rule-3``."""

    def __init__(self) -> None:
        self._counters: dict[str, int] = {}

    def next_id(self, rule_type: RuleType) -> str:
        """Allocate the next id for a rule type."""
        count = self._counters.get(rule_type, 0) + 1
        self._counters[rule_type] = count
        return f"{rule_type}-rule-{count}"


def random_rule_id(rule_type: RuleType) -> str:
    """Id for a rule created outside any pipeline."""
    return f"{rule_type}-rule-{uuid.uuid4().hex[:8]}"


class SelectionRule(ABC):
    """
    A pure transformation from entries and a selection to a new selection.

    Subclasses decide which paths are matched; this class applies the action,
    counts the affected paths and turns unexpected exceptions into failed results.
    """

    rule_type: ClassVar[RuleType]
    config_class: ClassVar[type[RuleConfigModel]]

    def __init__(self, config: Any = None, rule_id: str | None = None, enabled: bool = True):
        """
        Initialize the rule.

        Args:
            config: Config instance, a mapping in the persisted shape, or None for defaults
            rule_id: Identifier; a random one is generated when omitted
            enabled: Whether a pipeline should run this rule
        """
        if config is None:
            self.config = self.config_class()
        else:
            self.config = self.config_class.from_payload(config)
        self.id = rule_id or random_rule_id(self.rule_type)
        self.enabled = enabled

    @abstractmethod
    def validate(self) -> ValidationResult:
        """Check the configuration before execution."""

    @abstractmethod
    def describe(self) -> str:
        """One-line human readable summary."""

    @abstractmethod
    def find_matches(self, data: Sequence[Entry]) -> set[str]:
        """Paths this rule matches in ``data``."""

    def keep_existing(self, context: RuleContext) -> bool:
        return bool(self.config.keep_existing_selection or context.keep_existing_selection)

    def apply_action(
        self, current: frozenset[str], matched: Set[str], context: RuleContext
    ) -> frozenset[str]:
        """Combine matched paths with the current selection."""
        action = context.action
        match action:
            case SelectionAction.MARK:
                return current | matched
            case SelectionAction.UNMARK:
                return current - matched
            case _:
                assert_never(action)

    def execute(self, context: RuleContext) -> RuleResult:
        """
        Run the rule.

        Args:
            context: Entries, current selection and action

        Returns:
            RuleResult; on failure the selection is the unchanged input
        """
        current = frozenset(context.current_selection)
        try:
            matched = self.find_matches(context.data)
            selection = self.apply_action(current, matched, context)
        except Exception as e:
            logger.warning(f"Rule {self.id} failed: {e}")
            return RuleResult(selection=current, affected_count=0, success=False, error=str(e) or type(e).__name__)

        affected = len(selection ^ current)
        logger.debug(f"Rule {self.id} matched {len(matched)} paths, {affected} affected")
        return RuleResult(selection=selection, affected_count=affected, success=True)

    def preview(self, context: RuleContext) -> int:
        """Number of paths ``execute`` would change."""
        return self.execute(context).affected_count

    def to_json(self) -> dict[str, Any]:
        """Serialize into the pipeline rule shape."""
        return {
            "id": self.id,
            "type": str(self.rule_type),
            "config": self.config.to_payload(),
            "enabled": self.enabled,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r}, enabled={self.enabled})"
