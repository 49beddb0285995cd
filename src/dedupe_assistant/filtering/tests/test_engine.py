"""Tests for the filter engine."""

import itertools

import pytest

from ...core.models import Entry, RawMetadata
from ..engine import (
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
    count_active_filters,
    is_any_filter_active,
    refresh_filters,
    reset_to_default,
)
from ..models import (
    AspectRatio,
    DateFilterConfig,
    DatePreset,
    ExtensionFilterConfig,
    ExtensionFilterMode,
    FilterState,
    MarkStatusOption,
    PathFilterConfig,
    PathMatchMode,
    RangeFilterConfig,
    ResolutionFilterConfig,
    SimilarityFilterConfig,
)
from ..utils import DAY_MS

NOW = 1_700_000_000_000


def create_entry(path: str, group_id: int | None = None, is_ref: bool = False, **fields) -> Entry:
    """Create an Entry; raw metadata keywords go into RawMetadata."""
    raw_keys = {"size", "modified_date", "width", "height"}
    raw = {key: fields.pop(key) for key in list(fields) if key in raw_keys}
    return Entry(path=path, group_id=group_id, is_ref=is_ref, raw=RawMetadata(**raw) if raw else None, **fields)


def create_dataset() -> list[Entry]:
    """Three groups of different sizes plus an ungrouped entry."""
    return [
        create_entry("/g1/a.jpg", 1, size=100, modified_date=NOW - DAY_MS, width=1920, height=1080),
        create_entry("/g1/b.png", 1, size=200, modified_date=NOW - 10 * DAY_MS, is_ref=True),
        create_entry("/g2/a.jpg", 2, size=1000, modified_date=NOW - 400 * DAY_MS, similarity="80"),
        create_entry("/g2/b.mp4", 2, size=3000, modified_date=NOW - 2 * DAY_MS, width=500, height=500),
        create_entry("/g2/c.JPG", 2, size=10, modified_date=NOW, similarity="95%"),
        create_entry("/g3/a.txt", 3, size=5),
        create_entry("/loose/x.jpg", size=50, modified_date=NOW - 3 * DAY_MS),
    ]


def paths(entries: list[Entry]) -> list[str]:
    return [entry.path for entry in entries]


class TestMarkStatusFilter:
    """Test cases for apply_mark_status_filter."""

    def setup_method(self) -> None:
        """Set up data and a selection covering part of group 2 and all of group 1."""
        self.data = create_dataset()
        self.selection = {"/g1/a.jpg", "/g1/b.png", "/g2/a.jpg"}

    def test_empty_options_is_identity(self) -> None:
        """Test that no options means no filtering."""
        assert apply_mark_status_filter(self.data, [], self.selection) == self.data

    @pytest.mark.parametrize(
        "option,expected",
        [
            (MarkStatusOption.MARKED, ["/g1/a.jpg", "/g1/b.png", "/g2/a.jpg"]),
            (MarkStatusOption.UNMARKED, ["/g2/b.mp4", "/g2/c.JPG", "/g3/a.txt", "/loose/x.jpg"]),
            (MarkStatusOption.GROUP_ALL_MARKED, ["/g1/a.jpg", "/g1/b.png"]),
            (MarkStatusOption.GROUP_SOME_NOT_ALL, ["/g2/a.jpg", "/g2/b.mp4", "/g2/c.JPG"]),
            (MarkStatusOption.GROUP_HAS_SOME_MARKED, ["/g2/a.jpg", "/g2/b.mp4", "/g2/c.JPG"]),
            (MarkStatusOption.GROUP_ALL_UNMARKED, ["/g3/a.txt"]),
            (MarkStatusOption.PROTECTED, ["/g1/b.png"]),
        ],
    )
    def test_single_option(self, option, expected) -> None:
        """Test each option on its own."""
        assert paths(apply_mark_status_filter(self.data, [option], self.selection)) == expected

    def test_options_combine_with_or(self) -> None:
        """Test that every result matches at least one option, for all option pairs."""
        for pair in itertools.combinations(MarkStatusOption, 2):
            combined = set(paths(apply_mark_status_filter(self.data, list(pair), self.selection)))
            separate = set()
            for option in pair:
                separate |= set(paths(apply_mark_status_filter(self.data, [option], self.selection)))
            assert combined == separate


class TestGroupFilters:
    """Test cases for group count and group size filters."""

    @pytest.mark.parametrize("low,high", [(1, 1), (2, 2), (2, 3), (3, 100), (4, 10), (3, 2)])
    def test_group_count_bounds(self, low, high) -> None:
        """Test that every surviving group has a member count within the bounds."""
        data = create_dataset()
        config = RangeFilterConfig(enabled=True, min=low, max=high)

        result = apply_group_count_filter(data, config)

        for group_id in {e.group_id for e in result if e.group_id is not None}:
            count = sum(1 for e in result if e.group_id == group_id)
            assert low <= count <= high
        assert "/loose/x.jpg" in paths(result)

    def test_group_count_disabled(self) -> None:
        """Test that a disabled filter returns everything."""
        data = create_dataset()

        assert apply_group_count_filter(data, RangeFilterConfig(min=50, max=60)) == data

    def test_group_size(self) -> None:
        """Test that groups are kept by summed size in bytes."""
        data = create_dataset()
        config = RangeFilterConfig(enabled=True, min=250, max=1000)

        assert paths(apply_group_size_filter(data, config)) == ["/g1/a.jpg", "/g1/b.png", "/loose/x.jpg"]


class TestEntryFilters:
    """Test cases for per-entry filters."""

    def setup_method(self) -> None:
        """Set up the dataset."""
        self.data = create_dataset()

    def test_file_size(self) -> None:
        """Test inclusive byte bounds."""
        config = RangeFilterConfig(enabled=True, min=50, max=200)

        assert paths(apply_file_size_filter(self.data, config)) == ["/g1/a.jpg", "/g1/b.png", "/loose/x.jpg"]

    def test_inverted_range_matches_nothing(self) -> None:
        """Test that min > max is evaluated literally."""
        config = RangeFilterConfig(enabled=True, min=1000, max=10)

        assert apply_file_size_filter(self.data, config) == []

    def test_extension_include_and_exclude(self) -> None:
        """Test extension membership, case and leading dots."""
        include = ExtensionFilterConfig(enabled=True, extensions=[".JPG", "png"])
        exclude = ExtensionFilterConfig(enabled=True, extensions=["jpg"], mode=ExtensionFilterMode.EXCLUDE)

        assert paths(apply_extension_filter(self.data, include)) == [
            "/g1/a.jpg",
            "/g1/b.png",
            "/g2/a.jpg",
            "/g2/c.JPG",
            "/loose/x.jpg",
        ]
        assert paths(apply_extension_filter(self.data, exclude)) == ["/g1/b.png", "/g2/b.mp4", "/g3/a.txt"]

    def test_extension_empty_list_is_noop(self) -> None:
        """Test that an enabled filter without extensions keeps everything."""
        assert apply_extension_filter(self.data, ExtensionFilterConfig(enabled=True)) == self.data

    def test_date_last_7_days(self) -> None:
        """Test a relative window; entries without dates count as epoch zero."""
        config = DateFilterConfig(enabled=True, preset=DatePreset.LAST_7_DAYS)

        assert paths(apply_date_filter(self.data, config, now=NOW)) == [
            "/g1/a.jpg",
            "/g2/b.mp4",
            "/g2/c.JPG",
            "/loose/x.jpg",
        ]

    def test_date_custom(self) -> None:
        """Test a custom window with an explicit end."""
        config = DateFilterConfig(enabled=True, preset=DatePreset.CUSTOM, end_date=NOW - 365 * DAY_MS)

        assert paths(apply_date_filter(self.data, config, now=NOW)) == ["/g2/a.jpg", "/g3/a.txt"]

    def test_path(self) -> None:
        """Test path matching and the empty-pattern no-op."""
        config = PathFilterConfig(enabled=True, mode=PathMatchMode.STARTS_WITH, pattern="/G2/")

        assert paths(apply_path_filter(self.data, config)) == ["/g2/a.jpg", "/g2/b.mp4", "/g2/c.JPG"]
        assert apply_path_filter(self.data, PathFilterConfig(enabled=True)) == self.data

    def test_similarity(self) -> None:
        """Test that entries without similarity count as 100."""
        config = SimilarityFilterConfig(enabled=True, min=0, max=90)

        assert paths(apply_similarity_filter(self.data, config)) == ["/g2/a.jpg"]

    def test_resolution_passes_unknown(self) -> None:
        """Test bounds and aspect ratio; entries without a resolution pass."""
        config = ResolutionFilterConfig(enabled=True, min_width=1000, aspect_ratio=AspectRatio.WIDESCREEN)

        result = paths(apply_resolution_filter(self.data, config))

        assert "/g1/a.jpg" in result
        assert "/g2/b.mp4" not in result
        assert "/g3/a.txt" in result

    def test_resolution_max_height(self) -> None:
        """Test the upper height bound."""
        config = ResolutionFilterConfig(enabled=True, max_height=600)

        assert "/g1/a.jpg" not in paths(apply_resolution_filter(self.data, config))

    def test_selection_only(self) -> None:
        """Test keeping only selected entries."""
        assert paths(apply_selection_filter(self.data, True, {"/g3/a.txt"})) == ["/g3/a.txt"]
        assert apply_selection_filter(self.data, False, set()) == self.data


class TestShowAllInFilteredGroups:
    """Test cases for the group expansion."""

    def test_expands_surviving_groups(self) -> None:
        """Test that whole groups reappear while ungrouped entries need to survive."""
        data = create_dataset()
        filtered = [data[2], data[5]]

        result = apply_show_all_in_filtered_groups(data, filtered)

        assert paths(result) == ["/g2/a.jpg", "/g2/b.mp4", "/g2/c.JPG", "/g3/a.txt"]

    def test_ungrouped_survivor_kept(self) -> None:
        """Test that a surviving ungrouped entry stays next to expanded groups."""
        data = create_dataset()

        result = apply_show_all_in_filtered_groups(data, [data[0], data[6]])

        assert paths(result) == ["/g1/a.jpg", "/g1/b.png", "/loose/x.jpg"]

    def test_no_groups_returns_filtered(self) -> None:
        """Test that a result without groups is returned as is."""
        data = create_dataset()

        assert apply_show_all_in_filtered_groups(data, [data[6]]) == [data[6]]


class TestApplyFilters:
    """Test cases for apply_filters and related helpers."""

    def test_default_state_keeps_everything(self) -> None:
        """Test that the default state filters nothing."""
        data = create_dataset()

        result = apply_filters(data, set(), FilterState(), now=NOW)

        assert result.filtered_data == data
        assert result.stats.total_items == result.stats.filtered_items == 7
        assert result.stats.total_groups == 3
        assert result.stats.total_size == 4365
        assert result.stats.active_filter_count == 0

    def test_filters_combine_with_and(self) -> None:
        """Test that stages narrow each other's results."""
        data = create_dataset()
        state = FilterState(
            extension=ExtensionFilterConfig(enabled=True, extensions=["jpg"]),
            file_size=RangeFilterConfig(enabled=True, min=60, max=5000),
            show_all_in_filtered_groups=False,
        )

        result = apply_filters(data, set(), state, now=NOW)

        assert paths(result.filtered_data) == ["/g1/a.jpg", "/g2/a.jpg"]
        assert result.stats.filtered_groups == 2
        assert result.stats.filtered_size == 1100
        assert result.stats.active_filter_count == 2

    def test_show_all_applied_last(self) -> None:
        """Test that group expansion runs after the filters."""
        data = create_dataset()
        state = FilterState(path=PathFilterConfig(enabled=True, pattern="c.JPG", case_sensitive=True))

        result = apply_filters(data, set(), state, now=NOW)

        assert paths(result.filtered_data) == ["/g2/a.jpg", "/g2/b.mp4", "/g2/c.JPG"]

    def test_input_not_modified(self) -> None:
        """Test that the caller's list is untouched."""
        data = create_dataset()
        snapshot = list(data)

        apply_filters(data, set(), FilterState(selection_only=True), now=NOW)

        assert data == snapshot

    def test_refresh_matches_apply_and_is_idempotent(self) -> None:
        """Test that refresh_filters gives the same result every time."""
        data = create_dataset()
        selection = {"/g2/a.jpg"}
        state = FilterState(
            mark_status={"enabled": True, "options": ["groupSomeNotAll"]},
            modified_date=DateFilterConfig(enabled=True, preset=DatePreset.LAST_30_DAYS),
        )

        expected = apply_filters(data, selection, state, now=NOW)
        results = [refresh_filters(data, selection, state, now=NOW) for _ in range(3)]

        assert all(result == expected for result in results)


class TestFilterCounting:
    """Test cases for active filter counting and resets."""

    def test_default_state_has_no_active_filters(self) -> None:
        """Test the default state."""
        state = reset_to_default()

        assert count_active_filters(state) == 0
        assert not is_any_filter_active(state)

    def test_list_and_pattern_filters_need_content(self) -> None:
        """Test that enabled but empty filters are not counted."""
        state = FilterState(
            mark_status={"enabled": True},
            extension={"enabled": True},
            path={"enabled": True},
        )

        assert count_active_filters(state) == 0

    def test_each_category_counts(self) -> None:
        """Test that every category adds one."""
        state = FilterState(
            mark_status={"enabled": True, "options": ["marked"]},
            group_count={"enabled": True},
            group_size={"enabled": True},
            file_size={"enabled": True},
            extension={"enabled": True, "extensions": ["jpg"]},
            modified_date={"enabled": True},
            path={"enabled": True, "pattern": "x"},
            similarity={"enabled": True},
            resolution={"enabled": True},
            selection_only=True,
        )

        assert count_active_filters(state) == 10
        assert is_any_filter_active(state)

    @pytest.mark.parametrize("field", ["group_count", "file_size", "similarity", "resolution"])
    def test_is_any_filter_active_agrees_with_count(self, field) -> None:
        """Test that is_any_filter_active follows count_active_filters."""
        state = FilterState.model_validate({field: {"enabled": True}})

        assert is_any_filter_active(state) == (count_active_filters(state) > 0)

    def test_reset_returns_fresh_objects(self) -> None:
        """Test that each reset is equal but not identical."""
        first, second = reset_to_default(), reset_to_default()

        assert first == second
        assert first is not second
        assert first.extension.extensions is not second.extension.extensions
