"""Text rule: match paths by a text condition on one of their columns."""

import logging
from collections.abc import Sequence, Set

from ...core.models import Entry
from ..matchers import get_column_value, is_valid_regex, match_text
from ..models import (
    RuleContext,
    RuleResult,
    RuleType,
    SelectionAction,
    TextColumn,
    TextCondition,
    TextRuleConfig,
    ValidationResult,
    is_member,
)
from .base import SelectionRule

logger = logging.getLogger(__name__)


class TextRule(SelectionRule):
    """Marks or unmarks every path whose column matches the pattern."""

    rule_type = RuleType.TEXT
    config_class = TextRuleConfig
    config: TextRuleConfig

    def find_matches(self, data: Sequence[Entry]) -> set[str]:
        config = self.config
        return {
            entry.path
            for entry in data
            if match_text(
                get_column_value(entry.path, config.column),
                config.pattern,
                config.condition,
                case_sensitive=config.case_sensitive,
                use_regex=config.use_regex,
            )
        }

    def apply_action(
        self, current: frozenset[str], matched: Set[str], context: RuleContext
    ) -> frozenset[str]:
        # Unmarking with keep-existing on leaves the selection alone
        if context.action == SelectionAction.UNMARK and self.keep_existing(context):
            return current
        return super().apply_action(current, matched, context)

    def execute(self, context: RuleContext) -> RuleResult:
        validation = self.validate()
        if not validation.valid:
            logger.info(f"Text rule {self.id} not executed: {', '.join(validation.errors)}")
            return RuleResult(
                selection=frozenset(context.current_selection),
                affected_count=0,
                success=False,
                error=", ".join(validation.errors),
            )
        return super().execute(context)

    def validate(self) -> ValidationResult:
        config = self.config
        errors = []
        if not config.pattern:
            errors.append("Pattern must not be empty")
        if not is_member(TextColumn, config.column):
            errors.append(f"Invalid column: {config.column}")
        if not is_member(TextCondition, config.condition):
            errors.append(f"Invalid condition: {config.condition}")
        if config.use_regex and config.pattern and not is_valid_regex(config.pattern):
            errors.append(f"Invalid regular expression: {config.pattern}")
        return ValidationResult.from_errors(errors)

    def describe(self) -> str:
        config = self.config
        description = f'{config.column} {config.condition} "{config.pattern}"'
        if config.use_regex:
            description += " (regex)"
        if config.case_sensitive:
            description += " (case-sensitive)"
        return description
