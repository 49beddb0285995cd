"""Ordered, enable/disable-able sequence of selection rules."""

import logging
import uuid
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from .config_io import ExportConfig
from .models import RuleContext, RuleResult, RuleType, ValidationResult
from .rules import RULE_CLASSES, RuleIdAllocator, SelectionRule

logger = logging.getLogger(__name__)

DEFAULT_PIPELINE_NAME = "Default pipeline"


class RulePipeline:
    """Runs rules in order, feeding each one the previous rule's selection."""

    def __init__(
        self,
        name: str = DEFAULT_PIPELINE_NAME,
        pipeline_id: str | None = None,
        id_allocator: RuleIdAllocator | None = None,
    ):
        """
        Initialize an empty pipeline.

        Args:
            name: Display name
            pipeline_id: Identifier; a random one is generated when omitted
            id_allocator: Source of ids for rules created through this pipeline
        """
        self.id = pipeline_id or f"pipeline-{uuid.uuid4().hex[:8]}"
        self.name = name
        self.id_allocator = id_allocator or RuleIdAllocator()
        self._rules: list[SelectionRule] = []

    def add_rule(self, rule: SelectionRule) -> None:
        """Append a rule."""
        self._rules.append(rule)

    def create_rule(self, rule_type: RuleType | str, config: Any = None) -> SelectionRule:
        """
        Create a rule with an id from this pipeline's allocator and append it.

        Args:
            rule_type: group, text or directory
            config: Rule config, or None for defaults

        Returns:
            The new rule
        """
        rule_class = RULE_CLASSES[rule_type]
        rule = rule_class(config, rule_id=self.id_allocator.next_id(rule_class.rule_type))
        self.add_rule(rule)
        return rule

    def remove_rule(self, rule_id: str) -> bool:
        """Remove a rule by id. Returns whether a rule was removed."""
        for index, rule in enumerate(self._rules):
            if rule.id == rule_id:
                del self._rules[index]
                return True
        return False

    def reorder_rules(self, from_index: int, to_index: int) -> None:
        """Move the rule at ``from_index`` to ``to_index``; out-of-range indices are ignored."""
        count = len(self._rules)
        if not (0 <= from_index < count and 0 <= to_index < count):
            logger.debug(f"Ignoring reorder {from_index} -> {to_index} for {count} rules")
            return
        rule = self._rules.pop(from_index)
        self._rules.insert(to_index, rule)

    def enable_rule(self, rule_id: str, enabled: bool) -> bool:
        """Enable or disable a rule by id. Returns whether the rule was found."""
        for rule in self._rules:
            if rule.id == rule_id:
                rule.enabled = enabled
                return True
        return False

    def get_rules(self) -> list[SelectionRule]:
        """All rules, in order. The returned list is a copy."""
        return list(self._rules)

    def get_enabled_rules(self) -> list[SelectionRule]:
        return [rule for rule in self._rules if rule.enabled]

    def execute(self, context: RuleContext) -> RuleResult:
        """
        Fold every enabled rule over the current selection.

        Invalid or failing rules are skipped and reported; they never abort the run.

        Args:
            context: Entries, starting selection and action

        Returns:
            RuleResult with the final selection, the summed affected count and the
            combined error messages
        """
        current = frozenset(context.current_selection)
        enabled = self.get_enabled_rules()
        if not enabled:
            return RuleResult(selection=current, affected_count=0, success=True)

        errors: list[str] = []
        affected = 0
        for rule in enabled:
            validation = rule.validate()
            if not validation.valid:
                message = f"Rule {rule.id} validation failed: {', '.join(validation.errors)}"
                logger.warning(message)
                errors.append(message)
                continue

            result = rule.execute(replace(context, current_selection=current))
            if result.success:
                current = result.selection
                affected += result.affected_count
            else:
                errors.append(f"Rule {rule.id} execution failed: {result.error}")

        logger.info(
            f"Pipeline {self.name!r} ran {len(enabled)} rules: {affected} affected, {len(errors)} errors"
        )
        return RuleResult(
            selection=current,
            affected_count=affected,
            success=not errors,
            error="; ".join(errors) if errors else None,
        )

    def validate(self) -> ValidationResult:
        """Validate every rule, prefixing each error with the rule id."""
        errors = []
        for rule in self._rules:
            validation = rule.validate()
            errors.extend(f"[{rule.id}] {error}" for error in validation.errors)
        return ValidationResult.from_errors(errors)

    def preview(self, context: RuleContext) -> int:
        """Number of paths ``execute`` would change."""
        return self.execute(context).affected_count

    def to_json(self) -> dict[str, Any]:
        """Serialize to ``{name, rules: [{id, type, config, enabled}]}``."""
        return {"name": self.name, "rules": [rule.to_json() for rule in self._rules]}

    @classmethod
    def from_json(
        cls, payload: Mapping[str, Any], id_allocator: RuleIdAllocator | None = None
    ) -> "RulePipeline":
        """
        Rebuild a pipeline from ``to_json`` output.

        Rules of unknown type are dropped.
        """
        pipeline = cls(
            name=payload.get("name") or DEFAULT_PIPELINE_NAME,
            pipeline_id=payload.get("id"),
            id_allocator=id_allocator,
        )
        for item in payload.get("rules") or []:
            if not isinstance(item, Mapping):
                continue
            rule_type = item.get("type")
            rule_class = RULE_CLASSES.get(rule_type) if isinstance(rule_type, str) else None
            if rule_class is None:
                logger.debug(f"Dropping rule with unknown type {rule_type!r}")
                continue
            rule_id = item.get("id") or pipeline.id_allocator.next_id(rule_class.rule_type)
            rule = rule_class(item.get("config"), rule_id=rule_id, enabled=bool(item.get("enabled", True)))
            pipeline.add_rule(rule)
        return pipeline

    @classmethod
    def from_config(cls, config: ExportConfig, name: str = DEFAULT_PIPELINE_NAME) -> "RulePipeline":
        """Build a pipeline running the group, text and directory rules an import provides."""
        pipeline = cls(name=name)
        if config.group_rule is not None:
            pipeline.create_rule(RuleType.GROUP, config.group_rule)
        if config.text_rule is not None:
            pipeline.create_rule(RuleType.TEXT, config.text_rule)
        if config.directory_rule is not None:
            pipeline.create_rule(RuleType.DIRECTORY, config.directory_rule)
        return pipeline

    def __len__(self) -> int:
        return len(self._rules)
