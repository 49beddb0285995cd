"""Filter engine: independent predicate filters combined with AND semantics."""

import logging
from collections import Counter, defaultdict
from collections.abc import Sequence, Set
from typing import assert_never

from ..core.models import Entry
from .models import (
    DateFilterConfig,
    ExtensionFilterConfig,
    ExtensionFilterMode,
    FilterResult,
    FilterState,
    FilterStats,
    GroupMarkStatus,
    MarkStatusOption,
    PathFilterConfig,
    RangeFilterConfig,
    ResolutionFilterConfig,
    SimilarityFilterConfig,
)
from .utils import (
    get_date_range,
    get_file_extension,
    get_item_modified_date,
    get_item_resolution,
    get_item_similarity,
    get_item_size,
    get_unique_group_ids,
    mark_status_for,
    match_aspect_ratio,
    match_path,
)

logger = logging.getLogger(__name__)


def _matches_option(
    option: MarkStatusOption, entry: Entry, marked: bool, group_status: GroupMarkStatus | None
) -> bool:
    match option:
        case MarkStatusOption.MARKED:
            return marked
        case MarkStatusOption.UNMARKED:
            return not marked
        case MarkStatusOption.GROUP_HAS_SOME_MARKED:
            return group_status in (GroupMarkStatus.SOME_MARKED, GroupMarkStatus.SOME_NOT_ALL)
        case MarkStatusOption.GROUP_ALL_UNMARKED:
            return group_status == GroupMarkStatus.ALL_UNMARKED
        case MarkStatusOption.GROUP_SOME_NOT_ALL:
            return group_status == GroupMarkStatus.SOME_NOT_ALL
        case MarkStatusOption.GROUP_ALL_MARKED:
            return group_status == GroupMarkStatus.ALL_MARKED
        case MarkStatusOption.PROTECTED:
            return entry.is_ref
        case _:
            assert_never(option)


def apply_mark_status_filter(
    data: Sequence[Entry], options: Sequence[MarkStatusOption], selection: Set[str]
) -> list[Entry]:
    """
    Keep entries matching any of the mark status options.

    Group statuses are computed once per group over ``data``.
    """
    if not options:
        return list(data)

    members: dict[int, list[Entry]] = defaultdict(list)
    for entry in data:
        if entry.group_id is not None:
            members[entry.group_id].append(entry)
    statuses = {group_id: mark_status_for(group, selection) for group_id, group in members.items()}

    return [
        entry
        for entry in data
        if any(
            _matches_option(option, entry, entry.path in selection, statuses.get(entry.group_id))
            for option in options
        )
    ]


def _filter_groups_by(data: Sequence[Entry], valid_group_ids: set[int]) -> list[Entry]:
    return [entry for entry in data if entry.group_id is None or entry.group_id in valid_group_ids]


def apply_group_count_filter(data: Sequence[Entry], config: RangeFilterConfig) -> list[Entry]:
    """Keep groups whose member count lies in [min, max]; ungrouped entries pass."""
    if not config.enabled:
        return list(data)

    counts = Counter(entry.group_id for entry in data if entry.group_id is not None)
    valid = {group_id for group_id, count in counts.items() if config.min <= count <= config.max}
    return _filter_groups_by(data, valid)


def apply_group_size_filter(data: Sequence[Entry], config: RangeFilterConfig) -> list[Entry]:
    """Keep groups whose summed size in bytes lies in [min, max]; ungrouped entries pass."""
    if not config.enabled:
        return list(data)

    totals: Counter[int] = Counter()
    for entry in data:
        if entry.group_id is not None:
            totals[entry.group_id] += get_item_size(entry)
    valid = {group_id for group_id, total in totals.items() if config.min <= total <= config.max}
    return _filter_groups_by(data, valid)


def apply_file_size_filter(data: Sequence[Entry], config: RangeFilterConfig) -> list[Entry]:
    if not config.enabled:
        return list(data)
    return [entry for entry in data if config.min <= get_item_size(entry) <= config.max]


def apply_extension_filter(data: Sequence[Entry], config: ExtensionFilterConfig) -> list[Entry]:
    """Include or exclude entries by extension; no-op without extensions."""
    if not config.enabled or not config.extensions:
        return list(data)

    extensions = {extension.lower().removeprefix(".") for extension in config.extensions}
    mode = config.mode
    match mode:
        case ExtensionFilterMode.INCLUDE:
            return [entry for entry in data if get_file_extension(entry.path) in extensions]
        case ExtensionFilterMode.EXCLUDE:
            return [entry for entry in data if get_file_extension(entry.path) not in extensions]
        case _:
            assert_never(mode)


def apply_date_filter(
    data: Sequence[Entry], config: DateFilterConfig, now: int | None = None
) -> list[Entry]:
    if not config.enabled:
        return list(data)

    start, end = get_date_range(config.preset, config.start_date, config.end_date, now=now)
    return [entry for entry in data if start <= get_item_modified_date(entry) <= end]


def apply_path_filter(data: Sequence[Entry], config: PathFilterConfig) -> list[Entry]:
    if not config.enabled or not config.pattern:
        return list(data)
    return [
        entry
        for entry in data
        if match_path(entry.path, config.pattern, config.mode, config.case_sensitive)
    ]


def apply_similarity_filter(data: Sequence[Entry], config: SimilarityFilterConfig) -> list[Entry]:
    if not config.enabled:
        return list(data)
    return [entry for entry in data if config.min <= get_item_similarity(entry) <= config.max]


def _resolution_matches(entry: Entry, config: ResolutionFilterConfig) -> bool:
    resolution = get_item_resolution(entry)
    if resolution is None:
        return True

    width, height = resolution
    if config.min_width is not None and width < config.min_width:
        return False
    if config.max_width is not None and width > config.max_width:
        return False
    if config.min_height is not None and height < config.min_height:
        return False
    if config.max_height is not None and height > config.max_height:
        return False
    if config.aspect_ratio is not None:
        return match_aspect_ratio(width, height, config.aspect_ratio)
    return True


def apply_resolution_filter(data: Sequence[Entry], config: ResolutionFilterConfig) -> list[Entry]:
    """Width, height and aspect ratio bounds; entries without a resolution pass."""
    if not config.enabled:
        return list(data)
    return [entry for entry in data if _resolution_matches(entry, config)]


def apply_selection_filter(
    data: Sequence[Entry], selection_only: bool, selection: Set[str]
) -> list[Entry]:
    if not selection_only:
        return list(data)
    return [entry for entry in data if entry.path in selection]


def apply_show_all_in_filtered_groups(
    original: Sequence[Entry], filtered: Sequence[Entry]
) -> list[Entry]:
    """
    Expand a filtered view to whole groups.

    Every original entry whose group survived is shown again; ungrouped entries are
    kept only if they survived themselves. Order follows ``original``.
    """
    group_ids = get_unique_group_ids(filtered)
    if not group_ids:
        return list(filtered)

    surviving_paths = {entry.path for entry in filtered}
    return [
        entry
        for entry in original
        if (entry.group_id is not None and entry.group_id in group_ids)
        or (entry.group_id is None and entry.path in surviving_paths)
    ]


def count_active_filters(state: FilterState) -> int:
    """Number of filter categories that would narrow the data."""
    active = [
        state.mark_status.enabled and bool(state.mark_status.options),
        state.group_count.enabled,
        state.group_size.enabled,
        state.file_size.enabled,
        state.extension.enabled and bool(state.extension.extensions),
        state.modified_date.enabled,
        state.path.enabled and bool(state.path.pattern),
        state.similarity.enabled,
        state.resolution.enabled,
        state.selection_only,
    ]
    return sum(active)


def is_any_filter_active(state: FilterState) -> bool:
    return count_active_filters(state) > 0


def calculate_stats(
    original: Sequence[Entry], filtered: Sequence[Entry], state: FilterState
) -> FilterStats:
    return FilterStats(
        total_items=len(original),
        filtered_items=len(filtered),
        total_groups=len(get_unique_group_ids(original)),
        filtered_groups=len(get_unique_group_ids(filtered)),
        total_size=sum(get_item_size(entry) for entry in original),
        filtered_size=sum(get_item_size(entry) for entry in filtered),
        active_filter_count=count_active_filters(state),
    )


def apply_filters(
    data: Sequence[Entry],
    selection: Set[str],
    filter_state: FilterState,
    now: int | None = None,
) -> FilterResult:
    """
    Apply every enabled filter in a fixed order, then the group expansion.

    Args:
        data: Entries to filter; never modified
        selection: Currently selected paths
        filter_state: Filter configuration
        now: Current time in epoch millis for date windows; the system clock when omitted

    Returns:
        FilterResult with the visible entries and their statistics
    """
    state = filter_state
    filtered = list(data)

    if state.mark_status.enabled:
        filtered = apply_mark_status_filter(filtered, state.mark_status.options, selection)
    filtered = apply_group_count_filter(filtered, state.group_count)
    filtered = apply_group_size_filter(filtered, state.group_size)
    filtered = apply_file_size_filter(filtered, state.file_size)
    filtered = apply_extension_filter(filtered, state.extension)
    filtered = apply_date_filter(filtered, state.modified_date, now=now)
    filtered = apply_path_filter(filtered, state.path)
    filtered = apply_similarity_filter(filtered, state.similarity)
    filtered = apply_resolution_filter(filtered, state.resolution)
    filtered = apply_selection_filter(filtered, state.selection_only, selection)

    if state.show_all_in_filtered_groups:
        filtered = apply_show_all_in_filtered_groups(data, filtered)

    stats = calculate_stats(data, filtered, state)
    logger.debug(
        f"Filtered {stats.total_items} entries to {stats.filtered_items} "
        f"with {stats.active_filter_count} active filters"
    )
    return FilterResult(filtered_data=filtered, stats=stats)


def refresh_filters(
    data: Sequence[Entry],
    selection: Set[str],
    filter_state: FilterState,
    now: int | None = None,
) -> FilterResult:
    """Re-run the filters, e.g. after the selection changed. Same result as ``apply_filters``."""
    return apply_filters(data, selection, filter_state, now=now)


def reset_to_default() -> FilterState:
    """A fresh default filter state."""
    return FilterState()
