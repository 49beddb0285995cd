"""Versioned import and export of rule configurations."""

import json
import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .models import (
    DirectoryMode,
    DirectoryRuleConfig,
    GroupRuleConfig,
    GroupSelectionMode,
    SortCriterion,
    SortDirection,
    SortField,
    TextColumn,
    TextCondition,
    TextRuleConfig,
)

logger = logging.getLogger(__name__)

CONFIG_VERSION = "1.0.0"
INVALID_JSON_ERROR = "Invalid JSON format"


class ExportConfig(BaseModel):
    """Persisted shape: a version stamp plus any subset of the rule configs."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str = Field(..., description="Semantic version of the config format")
    group_rule: GroupRuleConfig | None = None
    text_rule: TextRuleConfig | None = None
    directory_rule: DirectoryRuleConfig | None = None


class ImportedSortCriterion(SortCriterion):
    """Sort criterion as read from an import: only the pre-filter is optional."""

    direction: SortDirection = Field(..., description="Sort direction")
    prefer_empty: bool = Field(..., description="Place entries without a value first")
    enabled: bool = Field(..., description="Whether this criterion is applied")


class ImportedGroupRuleConfig(GroupRuleConfig):
    mode: GroupSelectionMode = Field(..., description="Which sorted members are matched")
    sort_criteria: list[ImportedSortCriterion] = Field(..., description="Ordered sort keys")
    keep_existing_selection: bool = Field(..., description="Keep the current selection")


class ImportedTextRuleConfig(TextRuleConfig):
    column: TextColumn = Field(..., description="Part of the path to test")
    condition: TextCondition = Field(..., description="Comparison to apply")
    pattern: str = Field(..., description="Literal text or regular expression")
    use_regex: bool = Field(..., description="Treat the pattern as a regular expression")
    case_sensitive: bool = Field(..., description="Compare case-sensitively")
    keep_existing_selection: bool = Field(..., description="Keep the current selection")


class ImportedDirectoryRuleConfig(DirectoryRuleConfig):
    mode: DirectoryMode = Field(..., description="Directory strategy")
    directories: list[str] = Field(..., description="Directories the rule targets")
    keep_existing_selection: bool = Field(..., description="Keep the current selection")


class ImportedConfig(BaseModel):
    """
    Schema imports are checked against.

    Every rule config present must be complete; a partial rule config is rejected
    instead of being filled in from defaults.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    version: str = Field(..., description="Semantic version of the config format")
    group_rule: ImportedGroupRuleConfig | None = None
    text_rule: ImportedTextRuleConfig | None = None
    directory_rule: ImportedDirectoryRuleConfig | None = None


class RuleConfigSet(BaseModel):
    """The complete set of rule configs a user is editing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    group_rule: GroupRuleConfig
    text_rule: TextRuleConfig
    directory_rule: DirectoryRuleConfig


@dataclass(frozen=True)
class ExportResult:
    success: bool
    data: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class ImportResult:
    success: bool
    config: ExportConfig | None = None
    errors: list[str] | None = None


def default_rule_configs() -> RuleConfigSet:
    """Fresh rule configs with the defaults new users start from."""
    return RuleConfigSet(
        group_rule=GroupRuleConfig(
            sort_criteria=[
                SortCriterion(field=SortField.MODIFIED_DATE, direction=SortDirection.DESC)
            ]
        ),
        text_rule=TextRuleConfig(),
        directory_rule=DirectoryRuleConfig(),
    )


def export_config(
    group_rule: GroupRuleConfig | dict[str, Any] | None = None,
    text_rule: TextRuleConfig | dict[str, Any] | None = None,
    directory_rule: DirectoryRuleConfig | dict[str, Any] | None = None,
) -> ExportResult:
    """
    Serialize rule configs to versioned JSON.

    Args:
        group_rule: Group rule config to include, if any
        text_rule: Text rule config to include, if any
        directory_rule: Directory rule config to include, if any

    Returns:
        ExportResult with the JSON text, or the error that prevented serialization
    """
    try:
        config = ExportConfig(
            version=CONFIG_VERSION,
            group_rule=group_rule,
            text_rule=text_rule,
            directory_rule=directory_rule,
        )
        payload = config.model_dump(by_alias=True, mode="json", exclude_none=True)
        return ExportResult(success=True, data=json.dumps(payload, indent=2))
    except (ValueError, TypeError) as e:
        logger.warning(f"Config export failed: {e}")
        return ExportResult(success=False, error=str(e))


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"])
    return f"{location}: {error['msg']}" if location else error["msg"]


def import_config(text: str) -> ImportResult:
    """
    Parse and validate exported config JSON.

    Every rule config present must be complete. Only the pre-filter of a sort
    criterion may be left out.

    Args:
        text: JSON text, typically read from a file or the clipboard

    Returns:
        ImportResult with the typed config, or every problem found
    """
    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        logger.warning("Config import failed: invalid JSON")
        return ImportResult(success=False, errors=[INVALID_JSON_ERROR])

    try:
        ImportedConfig.model_validate(payload)
        config = ExportConfig.model_validate(payload)
    except ValidationError as e:
        errors = [_format_error(error) for error in e.errors()]
        logger.warning(f"Config import failed with {len(errors)} error(s)")
        return ImportResult(success=False, errors=errors)

    if not is_version_compatible(config.version):
        logger.info(f"Imported config version {config.version} differs from {CONFIG_VERSION}")
    return ImportResult(success=True, config=config)


def is_version_compatible(version: str) -> bool:
    """Whether a config version shares the current major version."""
    return version.split(".")[0] == CONFIG_VERSION.split(".")[0]


def merge_configs(current: RuleConfigSet, imported: ExportConfig) -> RuleConfigSet:
    """Replace each rule config that the import provides, keep the rest."""
    return RuleConfigSet(
        group_rule=imported.group_rule if imported.group_rule is not None else current.group_rule,
        text_rule=imported.text_rule if imported.text_rule is not None else current.text_rule,
        directory_rule=imported.directory_rule if imported.directory_rule is not None else current.directory_rule,
    )
