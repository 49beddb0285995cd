"""Filter engine for duplicate scan results."""

from .engine import (
    apply_date_filter,
    apply_extension_filter,
    apply_file_size_filter,
    apply_filters,
    apply_group_count_filter,
    apply_group_size_filter,
    apply_mark_status_filter,
    apply_path_filter,
    apply_resolution_filter,
    apply_selection_filter,
    apply_show_all_in_filtered_groups,
    apply_similarity_filter,
    calculate_stats,
    count_active_filters,
    is_any_filter_active,
    refresh_filters,
    reset_to_default,
)
from .models import (
    AspectRatio,
    DatePreset,
    ExtensionFilterMode,
    FilterPreset,
    FilterResult,
    FilterState,
    FilterStats,
    GroupMarkStatus,
    MarkStatusOption,
    PathMatchMode,
    SizeUnit,
)
from .presets import (
    PRESET_CONFIGS,
    apply_preset,
    default_filter_state,
    get_preset_display_name,
    reset_filter_state,
)
from .schemas import parse_filter_state, validate_filter_state
from .scope import (
    FilteredSelectionStats,
    deselect_all_filtered,
    get_filtered_selection_stats,
    get_selected_in_filtered,
    invert_selection_filtered,
    is_all_filtered_selected,
    is_any_filtered_selected,
    select_all_filtered,
)
from .similarity import SimilarityLevel, get_similarity_level, similarity_distribution

__all__ = [
    "AspectRatio",
    "DatePreset",
    "ExtensionFilterMode",
    "FilterPreset",
    "FilterResult",
    "FilterState",
    "FilterStats",
    "FilteredSelectionStats",
    "GroupMarkStatus",
    "MarkStatusOption",
    "PRESET_CONFIGS",
    "PathMatchMode",
    "SimilarityLevel",
    "SizeUnit",
    "apply_date_filter",
    "apply_extension_filter",
    "apply_file_size_filter",
    "apply_filters",
    "apply_group_count_filter",
    "apply_group_size_filter",
    "apply_mark_status_filter",
    "apply_path_filter",
    "apply_preset",
    "apply_resolution_filter",
    "apply_selection_filter",
    "apply_show_all_in_filtered_groups",
    "apply_similarity_filter",
    "calculate_stats",
    "count_active_filters",
    "default_filter_state",
    "deselect_all_filtered",
    "get_filtered_selection_stats",
    "get_preset_display_name",
    "get_selected_in_filtered",
    "get_similarity_level",
    "invert_selection_filtered",
    "is_all_filtered_selected",
    "is_any_filter_active",
    "is_any_filtered_selected",
    "parse_filter_state",
    "refresh_filters",
    "reset_filter_state",
    "reset_to_default",
    "select_all_filtered",
    "similarity_distribution",
    "validate_filter_state",
]
