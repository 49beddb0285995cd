"""Group rule: filter and sort each duplicate group, then pick members by position."""

import logging
import re
from collections import defaultdict
from collections.abc import Sequence
from functools import cmp_to_key
from typing import assert_never

from ...core.models import Entry
from ..matchers import get_column_value
from ..models import (
    FilterCondition,
    GroupRuleConfig,
    GroupSelectionMode,
    RuleType,
    SortCriterion,
    SortDirection,
    SortField,
    TextColumn,
    ValidationResult,
    is_member,
)
from .base import SelectionRule

logger = logging.getLogger(__name__)

FieldValue = str | int | float | None

_DRIVE_PATTERN = re.compile(r"^[A-Za-z]:")

MODE_LABELS = {
    GroupSelectionMode.SELECT_ALL_EXCEPT_ONE: "Select all except one",
    GroupSelectionMode.SELECT_ONE: "Select one",
    GroupSelectionMode.SELECT_ALL: "Select all",
}


def get_disk(path: str) -> str:
    """Drive letter (``C:``) on Windows paths, otherwise the first path segment."""
    if _DRIVE_PATTERN.match(path):
        return path[:2].upper()
    segments = [segment for segment in path.replace("\\", "/").split("/") if segment]
    return f"/{segments[0]}" if segments else "/"


def get_file_type(path: str) -> str:
    """Lower-cased extension of the file name, or '' when there is none."""
    name = get_column_value(path, TextColumn.FILE_NAME)
    dot = name.rfind(".")
    return name[dot + 1 :].lower() if dot > 0 else ""


def get_field_value(entry: Entry, sort_field: SortField) -> FieldValue:
    """Value of a sort field for one entry, or None when unknown."""
    raw = entry.raw
    match sort_field:
        case SortField.FOLDER_PATH:
            return get_column_value(entry.path, TextColumn.FOLDER_PATH)
        case SortField.FILE_NAME:
            return get_column_value(entry.path, TextColumn.FILE_NAME)
        case SortField.FILE_SIZE:
            return raw.size if raw else None
        case SortField.CREATION_DATE:
            if raw is None:
                return None
            return raw.created_date if raw.created_date is not None else raw.modified_date
        case SortField.MODIFIED_DATE:
            return raw.modified_date if raw else None
        case SortField.RESOLUTION:
            if raw and raw.width and raw.height:
                return raw.width * raw.height
            return None
        case SortField.DISK:
            return get_disk(entry.path)
        case SortField.FILE_TYPE:
            return get_file_type(entry.path)
        case SortField.HASH:
            return raw.hash if raw else None
        case SortField.HARD_LINKS:
            return raw.hardlinks if raw else None
        case _:
            assert_never(sort_field)


def _is_empty(value: FieldValue) -> bool:
    return value is None or value == ""


def _is_number(value: FieldValue) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _compare_values(a: FieldValue, b: FieldValue) -> int:
    if _is_number(a) and _is_number(b):
        return (a > b) - (a < b)
    text_a = "" if a is None else str(a)
    text_b = "" if b is None else str(b)
    # Case-insensitive order, code point order breaks ties
    key_a = (text_a.casefold(), text_a)
    key_b = (text_b.casefold(), text_b)
    return (key_a > key_b) - (key_a < key_b)


def compare_entries(a: Entry, b: Entry, criteria: Sequence[SortCriterion]) -> int:
    """Multi-key comparison; earlier criteria take precedence."""
    for criterion in criteria:
        value_a = get_field_value(a, criterion.field)
        value_b = get_field_value(b, criterion.field)

        if criterion.prefer_empty:
            empty_a, empty_b = _is_empty(value_a), _is_empty(value_b)
            if empty_a and not empty_b:
                return -1
            if empty_b and not empty_a:
                return 1

        result = _compare_values(value_a, value_b)
        if result:
            return -result if criterion.direction == SortDirection.DESC else result
    return 0


def _passes_filter(entry: Entry, criterion: SortCriterion) -> bool:
    condition = criterion.filter_condition
    if condition is None or condition == FilterCondition.NONE or not criterion.filter_value:
        return True

    value = get_field_value(entry, criterion.field)
    text = ("" if value is None else str(value)).lower()
    expected = criterion.filter_value.lower()

    match condition:
        case FilterCondition.CONTAINS:
            return expected in text
        case FilterCondition.NOT_CONTAINS:
            return expected not in text
        case FilterCondition.STARTS_WITH:
            return text.startswith(expected)
        case FilterCondition.ENDS_WITH:
            return text.endswith(expected)
        case FilterCondition.EQUALS:
            return text == expected
        case FilterCondition.NONE:
            return True
        case _:
            assert_never(condition)


def sort_group(entries: Sequence[Entry], criteria: Sequence[SortCriterion]) -> list[Entry]:
    """
    Filter and stably sort one group by its enabled criteria.

    A group with no enabled criteria is returned in input order, unfiltered.
    """
    enabled = [criterion for criterion in criteria if criterion.enabled]
    if not enabled:
        return list(entries)

    kept = [entry for entry in entries if all(_passes_filter(entry, c) for c in enabled)]
    return sorted(kept, key=cmp_to_key(lambda a, b: compare_entries(a, b, enabled)))


class GroupRule(SelectionRule):
    """Selects members of each group by their position after sorting."""

    rule_type = RuleType.GROUP
    config_class = GroupRuleConfig
    config: GroupRuleConfig

    def find_matches(self, data: Sequence[Entry]) -> set[str]:
        groups: dict[int, list[Entry]] = defaultdict(list)
        for entry in data:
            if entry.group_id is not None:
                groups[entry.group_id].append(entry)

        matched: set[str] = set()
        for group_id, entries in groups.items():
            ordered = sort_group(entries, self.config.sort_criteria)
            picked = self._select_by_mode(ordered)
            logger.debug(f"Group {group_id}: {len(picked)} of {len(entries)} entries matched")
            matched.update(entry.path for entry in picked)
        return matched

    def _select_by_mode(self, ordered: list[Entry]) -> list[Entry]:
        mode = self.config.mode
        match mode:
            case GroupSelectionMode.SELECT_ALL_EXCEPT_ONE:
                return ordered[1:]
            case GroupSelectionMode.SELECT_ONE:
                return ordered[:1]
            case GroupSelectionMode.SELECT_ALL:
                return ordered
            case _:
                assert_never(mode)

    def validate(self) -> ValidationResult:
        errors = []
        if not is_member(GroupSelectionMode, self.config.mode):
            errors.append(f"Invalid selection mode: {self.config.mode}")

        for index, criterion in enumerate(self.config.sort_criteria):
            sort_field = getattr(criterion, "field", None)
            direction = getattr(criterion, "direction", None)
            if not is_member(SortField, sort_field):
                errors.append(f"Sort criterion {index + 1}: invalid field: {sort_field}")
            if not is_member(SortDirection, direction):
                errors.append(f"Sort criterion {index + 1}: invalid direction: {direction}")
            condition = getattr(criterion, "filter_condition", None)
            if condition is not None and not is_member(FilterCondition, condition):
                errors.append(f"Sort criterion {index + 1}: invalid filter condition: {condition}")

        return ValidationResult.from_errors(errors)

    def describe(self) -> str:
        label = MODE_LABELS.get(self.config.mode, str(self.config.mode))
        enabled = [c for c in self.config.sort_criteria if c.enabled]
        if not enabled:
            return label
        keys = ", ".join(f"{c.field} {c.direction}" for c in enabled)
        return f"{label}, sorted by {keys}"
