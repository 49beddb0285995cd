"""Selection assistant: rules, pipeline and config import/export."""

from .config_io import (
    CONFIG_VERSION,
    ExportConfig,
    ExportResult,
    ImportResult,
    ImportedConfig,
    RuleConfigSet,
    default_rule_configs,
    export_config,
    import_config,
    is_version_compatible,
    merge_configs,
)
from .matchers import get_column_value, get_directory, is_in_directory, is_valid_regex, match_text
from .models import (
    DirectoryMode,
    DirectoryRuleConfig,
    FilterCondition,
    GroupRuleConfig,
    GroupSelectionMode,
    RuleContext,
    RuleResult,
    RuleType,
    SelectionAction,
    SortCriterion,
    SortDirection,
    SortField,
    TextColumn,
    TextCondition,
    TextRuleConfig,
    ValidationResult,
)
from .pipeline import RulePipeline
from .rules import DirectoryRule, GroupRule, RuleIdAllocator, SelectionRule, TextRule

__all__ = [
    "CONFIG_VERSION",
    "DirectoryMode",
    "DirectoryRule",
    "DirectoryRuleConfig",
    "ExportConfig",
    "ExportResult",
    "FilterCondition",
    "GroupRule",
    "GroupRuleConfig",
    "GroupSelectionMode",
    "ImportResult",
    "ImportedConfig",
    "RuleConfigSet",
    "RuleContext",
    "RuleIdAllocator",
    "RulePipeline",
    "RuleResult",
    "RuleType",
    "SelectionAction",
    "SelectionRule",
    "SortCriterion",
    "SortDirection",
    "SortField",
    "TextColumn",
    "TextCondition",
    "TextRule",
    "TextRuleConfig",
    "ValidationResult",
    "default_rule_configs",
    "export_config",
    "get_column_value",
    "get_directory",
    "import_config",
    "is_in_directory",
    "is_valid_regex",
    "is_version_compatible",
    "match_text",
    "merge_configs",
]
