"""Tests for the group rule."""

import pytest

from ...core.models import Entry, RawMetadata
from ..models import (
    FilterCondition,
    GroupRuleConfig,
    GroupSelectionMode,
    RuleContext,
    SelectionAction,
    SortCriterion,
    SortDirection,
    SortField,
)
from ..rules.group_rule import GroupRule, get_disk, get_field_value, get_file_type, sort_group


def create_entry(path: str, group_id: int | None = None, is_ref: bool = False, **raw) -> Entry:
    """Create an Entry with optional raw metadata."""
    return Entry(path=path, group_id=group_id, is_ref=is_ref, raw=RawMetadata(**raw) if raw else None)


def create_groups(sizes: list[int]) -> list[Entry]:
    """Create groups with the given member counts."""
    entries = []
    for group_id, size in enumerate(sizes, 1):
        for index in range(size):
            entries.append(create_entry(f"/g{group_id}/file{index}.jpg", group_id, size=index * 10))
    return entries


class TestFieldValues:
    """Test cases for sort field extraction."""

    def test_creation_date_falls_back_to_modified(self) -> None:
        """Test that creationDate uses modified_date when created_date is missing."""
        entry = create_entry("/a.jpg", 1, modified_date=500)

        assert get_field_value(entry, SortField.CREATION_DATE) == 500

    def test_resolution_requires_both_dimensions(self) -> None:
        """Test that resolution is width times height or None."""
        assert get_field_value(create_entry("/a.jpg", 1, width=10, height=20), SortField.RESOLUTION) == 200
        assert get_field_value(create_entry("/a.jpg", 1, width=10), SortField.RESOLUTION) is None

    def test_missing_raw_gives_none(self) -> None:
        """Test that numeric fields are None without raw metadata."""
        entry = create_entry("/a.jpg", 1)

        assert get_field_value(entry, SortField.FILE_SIZE) is None
        assert get_field_value(entry, SortField.HASH) is None

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("c:\\data\\a.jpg", "C:"),
            ("/mnt/disk1/a.jpg", "/mnt"),
            ("a.jpg", "/a.jpg"),
            ("/", "/"),
        ],
    )
    def test_get_disk(self, path, expected) -> None:
        """Test disk extraction for Windows and POSIX paths."""
        assert get_disk(path) == expected

    @pytest.mark.parametrize(
        "path,expected",
        [("/a/B.JPG", "jpg"), ("/a/archive.tar.gz", "gz"), ("/a/.hidden", ""), ("/a/noext", "")],
    )
    def test_get_file_type(self, path, expected) -> None:
        """Test extension extraction used by the fileType field."""
        assert get_file_type(path) == expected


class TestSortGroup:
    """Test cases for filtering and sorting a single group."""

    def test_no_enabled_criteria_keeps_order(self) -> None:
        """Test that disabled criteria leave the group untouched."""
        entries = [create_entry("/b.jpg", 1, size=1), create_entry("/a.jpg", 1, size=2)]
        criteria = [SortCriterion(field=SortField.FILE_NAME, enabled=False)]

        assert sort_group(entries, criteria) == entries

    def test_multi_key_sort(self) -> None:
        """Test that later keys break ties of earlier keys."""
        entries = [
            create_entry("/x/b.jpg", 1, size=100),
            create_entry("/x/a.jpg", 1, size=100),
            create_entry("/x/c.jpg", 1, size=300),
        ]
        criteria = [
            SortCriterion(field=SortField.FILE_SIZE, direction=SortDirection.DESC),
            SortCriterion(field=SortField.FILE_NAME, direction=SortDirection.ASC),
        ]

        ordered = sort_group(entries, criteria)

        assert [e.path for e in ordered] == ["/x/c.jpg", "/x/a.jpg", "/x/b.jpg"]

    def test_sort_is_stable(self) -> None:
        """Test that equal keys keep input order."""
        entries = [create_entry(f"/x/{name}.jpg", 1, size=5) for name in "dcba"]
        criteria = [SortCriterion(field=SortField.FILE_SIZE)]

        assert sort_group(entries, criteria) == entries

    def test_prefer_empty_puts_missing_values_first(self) -> None:
        """Test that preferEmpty moves entries without a value to the front."""
        entries = [
            create_entry("/x/a.jpg", 1, modified_date=10),
            create_entry("/x/b.jpg", 1),
            create_entry("/x/c.jpg", 1, modified_date=5),
        ]
        criteria = [
            SortCriterion(field=SortField.MODIFIED_DATE, direction=SortDirection.DESC, prefer_empty=True)
        ]

        ordered = sort_group(entries, criteria)

        assert [e.path for e in ordered] == ["/x/b.jpg", "/x/a.jpg", "/x/c.jpg"]

    def test_string_fields_compare_case_insensitively(self) -> None:
        """Test that file names sort without regard to case."""
        entries = [create_entry("/x/b.jpg", 1), create_entry("/x/A.jpg", 1), create_entry("/x/c.jpg", 1)]
        criteria = [SortCriterion(field=SortField.FILE_NAME)]

        assert [e.path for e in sort_group(entries, criteria)] == ["/x/A.jpg", "/x/b.jpg", "/x/c.jpg"]

    def test_criterion_filter_removes_entries(self) -> None:
        """Test that a filter condition drops non-matching entries before sorting."""
        entries = [create_entry("/keep/a.jpg", 1), create_entry("/drop/b.jpg", 1)]
        criteria = [
            SortCriterion(
                field=SortField.FOLDER_PATH,
                filter_condition=FilterCondition.CONTAINS,
                filter_value="KEEP",
            )
        ]

        assert [e.path for e in sort_group(entries, criteria)] == ["/keep/a.jpg"]

    def test_filter_ignored_without_value(self) -> None:
        """Test that an empty filter value does not filter."""
        entries = [create_entry("/keep/a.jpg", 1), create_entry("/drop/b.jpg", 1)]
        criteria = [
            SortCriterion(field=SortField.FOLDER_PATH, filter_condition=FilterCondition.EQUALS, filter_value="")
        ]

        assert len(sort_group(entries, criteria)) == 2


class TestGroupRule:
    """Test cases for GroupRule execution."""

    @pytest.mark.parametrize("sizes", [[2], [3, 4], [2, 5, 7]])
    def test_select_all_except_one(self, sizes) -> None:
        """Test that all but one member of every group is selected."""
        rule = GroupRule(GroupRuleConfig(mode=GroupSelectionMode.SELECT_ALL_EXCEPT_ONE))
        data = create_groups(sizes)

        result = rule.execute(RuleContext(data=data))

        assert result.success
        for group_id, size in enumerate(sizes, 1):
            selected = [p for p in result.selection if p.startswith(f"/g{group_id}/")]
            assert len(selected) == size - 1

    @pytest.mark.parametrize("sizes", [[1], [3, 4], [2, 5, 7]])
    def test_select_one(self, sizes) -> None:
        """Test that exactly one member of every group is selected."""
        rule = GroupRule(GroupRuleConfig(mode=GroupSelectionMode.SELECT_ONE))

        result = rule.execute(RuleContext(data=create_groups(sizes)))

        assert len(result.selection) == len(sizes)

    def test_select_all(self) -> None:
        """Test that every grouped member is selected."""
        data = create_groups([2, 3])
        rule = GroupRule({"mode": "selectAll"})

        result = rule.execute(RuleContext(data=data))

        assert result.selection == {e.path for e in data}
        assert result.affected_count == 5

    def test_ungrouped_entries_ignored(self) -> None:
        """Test that entries without a group are never matched."""
        data = [create_entry("/loose.jpg"), *create_groups([2])]
        rule = GroupRule(GroupRuleConfig(mode=GroupSelectionMode.SELECT_ALL))

        result = rule.execute(RuleContext(data=data))

        assert "/loose.jpg" not in result.selection

    def test_sort_decides_which_member_is_kept(self) -> None:
        """Test that the first member after sorting is the one left unselected."""
        data = [
            create_entry("/g/old.jpg", 1, modified_date=1),
            create_entry("/g/new.jpg", 1, modified_date=9),
        ]
        config = GroupRuleConfig(
            sort_criteria=[SortCriterion(field=SortField.MODIFIED_DATE, direction=SortDirection.DESC)]
        )

        result = GroupRule(config).execute(RuleContext(data=data))

        assert result.selection == {"/g/old.jpg"}

    def test_mark_keeps_existing_selection(self) -> None:
        """Test that marking is a union with the current selection."""
        data = create_groups([3])
        current = frozenset({"/elsewhere.jpg"})

        result = GroupRule().execute(RuleContext(data=data, current_selection=current))

        assert current <= result.selection
        assert result.affected_count == 2

    def test_unmark_subtracts_matches(self) -> None:
        """Test that unmarking removes matched paths."""
        data = create_groups([3])
        current = frozenset(e.path for e in data)
        context = RuleContext(
            data=data, current_selection=current, action=SelectionAction.UNMARK, keep_existing_selection=True
        )

        result = GroupRule().execute(context)

        assert result.selection == {"/g1/file0.jpg"}
        assert result.affected_count == 2

    def test_does_not_mutate_input_selection(self) -> None:
        """Test that the caller's set is left untouched."""
        data = create_groups([3])
        current = {"/elsewhere.jpg"}

        GroupRule().execute(RuleContext(data=data, current_selection=current))

        assert current == {"/elsewhere.jpg"}

    def test_invalid_mode_fails_without_changing_selection(self) -> None:
        """Test that execution errors are reported instead of raised."""
        rule = GroupRule({"mode": "selectNothing"})
        current = frozenset({"/a.jpg"})

        result = rule.execute(RuleContext(data=create_groups([2]), current_selection=current))

        assert result.success is False
        assert result.selection == current
        assert result.error

    def test_validate(self) -> None:
        """Test validation of modes and criteria."""
        assert GroupRule().validate().valid

        invalid = GroupRule(
            {"mode": "bogus", "sortCriteria": [{"field": "color", "direction": "up", "filterCondition": "near"}]}
        )
        validation = invalid.validate()

        assert not validation.valid
        assert len(validation.errors) == 4

    def test_preview_matches_execute(self) -> None:
        """Test that preview reports the affected count without side effects."""
        data = create_groups([3, 2])
        rule = GroupRule()
        context = RuleContext(data=data)

        assert rule.preview(context) == rule.execute(context).affected_count == 3

    def test_describe(self) -> None:
        """Test the human readable summary."""
        rule = GroupRule(
            GroupRuleConfig(
                mode=GroupSelectionMode.SELECT_ONE,
                sort_criteria=[
                    SortCriterion(field=SortField.FILE_SIZE, direction=SortDirection.DESC),
                    SortCriterion(field=SortField.HASH, enabled=False),
                ],
            )
        )

        assert rule.describe() == "Select one, sorted by fileSize desc"
