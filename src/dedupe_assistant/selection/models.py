"""Rule configuration models and result types for the selection assistant."""

import logging
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..core.models import Entry

logger = logging.getLogger(__name__)


class SelectionAction(StrEnum):
    """What a rule does with the paths it matches."""

    MARK = "mark"
    UNMARK = "unmark"


class RuleType(StrEnum):
    """Discriminant used when rules are serialized."""

    GROUP = "group"
    TEXT = "text"
    DIRECTORY = "directory"


class GroupSelectionMode(StrEnum):
    SELECT_ALL_EXCEPT_ONE = "selectAllExceptOne"
    SELECT_ONE = "selectOne"
    SELECT_ALL = "selectAll"


class SortField(StrEnum):
    FOLDER_PATH = "folderPath"
    FILE_NAME = "fileName"
    FILE_SIZE = "fileSize"
    CREATION_DATE = "creationDate"
    MODIFIED_DATE = "modifiedDate"
    RESOLUTION = "resolution"
    DISK = "disk"
    FILE_TYPE = "fileType"
    HASH = "hash"
    HARD_LINKS = "hardLinks"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class FilterCondition(StrEnum):
    """Pre-sort filter applied by a sort criterion."""

    NONE = "none"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    EQUALS = "equals"


class TextColumn(StrEnum):
    FULL_PATH = "fullPath"
    FILE_NAME = "fileName"
    FOLDER_PATH = "folderPath"


class TextCondition(StrEnum):
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    EQUALS = "equals"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


class DirectoryMode(StrEnum):
    KEEP_ONE_PER_DIRECTORY = "keepOnePerDirectory"
    SELECT_ALL_IN_DIRECTORY = "selectAllInDirectory"
    EXCLUDE_DIRECTORY = "excludeDirectory"


def is_member(enum_class: type[Enum], value: Any) -> bool:
    """Check whether a raw value belongs to an enumeration."""
    try:
        enum_class(value)
    except (ValueError, TypeError):
        return False
    return True


class RuleConfigModel(BaseModel):
    """Base for rule configs: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_payload(cls, payload: Any) -> Self:
        """
        Build a config from untrusted data.

        Invalid payloads are still turned into a config, without validation, so that
        the owning rule can report the problems through ``validate()``.

        Args:
            payload: Mapping read from JSON, or an existing config instance

        Returns:
            Config instance
        """
        if isinstance(payload, cls):
            return payload
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Invalid {cls.__name__} payload, keeping it for validation: {e.error_count()} error(s)")
            return cls.model_construct(**cls._lenient_fields(payload))

    @classmethod
    def _lenient_fields(cls, payload: Any) -> dict[str, Any]:
        """Map alias or field names in ``payload`` to field names."""
        if not isinstance(payload, Mapping):
            return {}
        fields = {}
        for name, info in cls.model_fields.items():
            alias = info.alias or name
            if alias in payload:
                fields[name] = payload[alias]
            elif name in payload:
                fields[name] = payload[name]
        return fields

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the persisted camelCase JSON shape."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class SortCriterion(RuleConfigModel):
    """One key of the group rule's multi-key sort, with an optional pre-filter."""

    field: SortField = Field(..., description="Entry attribute to sort by")
    direction: SortDirection = Field(SortDirection.ASC, description="Sort direction")
    prefer_empty: bool = Field(False, description="Place entries without a value first")
    enabled: bool = Field(True, description="Whether this criterion is applied")
    filter_condition: FilterCondition | None = Field(None, description="Optional pre-filter")
    filter_value: str | None = Field(None, description="Value compared by the pre-filter")


class GroupRuleConfig(RuleConfigModel):
    """Pick paths inside each group after filtering and sorting it."""

    mode: GroupSelectionMode = Field(
        GroupSelectionMode.SELECT_ALL_EXCEPT_ONE, description="Which sorted members are matched"
    )
    sort_criteria: list[SortCriterion] = Field(default_factory=list, description="Ordered sort keys")
    keep_existing_selection: bool = Field(False, description="Keep the current selection")

    @classmethod
    def _lenient_fields(cls, payload: Any) -> dict[str, Any]:
        fields = super()._lenient_fields(payload)
        criteria = fields.get("sort_criteria")
        if isinstance(criteria, list):
            fields["sort_criteria"] = [SortCriterion.from_payload(item) for item in criteria]
        elif "sort_criteria" in fields:
            fields["sort_criteria"] = []
        return fields


class TextRuleConfig(RuleConfigModel):
    """Match paths whose chosen column satisfies a text condition."""

    column: TextColumn = Field(TextColumn.FULL_PATH, description="Part of the path to test")
    condition: TextCondition = Field(TextCondition.CONTAINS, description="Comparison to apply")
    pattern: str = Field("", description="Literal text or regular expression")
    use_regex: bool = Field(False, description="Treat the pattern as a regular expression")
    case_sensitive: bool = Field(False, description="Compare case-sensitively")
    keep_existing_selection: bool = Field(False, description="Keep the current selection")


class DirectoryRuleConfig(RuleConfigModel):
    """Match paths based on the directories they live in."""

    mode: DirectoryMode = Field(DirectoryMode.KEEP_ONE_PER_DIRECTORY, description="Directory strategy")
    directories: list[str] = Field(default_factory=list, description="Directories the rule targets")
    keep_existing_selection: bool = Field(False, description="Keep the current selection")


RuleConfig = GroupRuleConfig | TextRuleConfig | DirectoryRuleConfig


@dataclass(frozen=True)
class RuleContext:
    """Inputs shared by every rule execution."""

    data: Sequence[Entry]
    current_selection: Set[str] = frozenset()
    keep_existing_selection: bool = False
    action: SelectionAction = SelectionAction.MARK


@dataclass(frozen=True)
class RuleResult:
    """Outcome of running a rule or a pipeline."""

    selection: frozenset[str]
    affected_count: int
    success: bool
    error: str | None = None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a rule configuration."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(valid=not errors, errors=errors)
