"""Tests for the text rule."""

import pytest

from ...core.models import Entry
from ..models import RuleContext, SelectionAction, TextColumn, TextCondition, TextRuleConfig
from ..rules.text_rule import TextRule

PATHS = [
    "/photos/IMG_001.jpg",
    "/photos/IMG_001 (copy).jpg",
    "/backup/photos/IMG_001.jpg",
    "/docs/report.pdf",
]


class TestTextRule:
    """Test cases for TextRule."""

    def setup_method(self) -> None:
        """Set up entries for each test."""
        self.data = [Entry(path=path, group_id=1) for path in PATHS]

    def create_rule(self, **config) -> TextRule:
        """Create a text rule from config keyword arguments."""
        return TextRule(TextRuleConfig(**config))

    def test_mark_is_union(self) -> None:
        """Test that marking adds matched paths to the selection."""
        rule = self.create_rule(pattern="copy")
        initial = frozenset({"/docs/report.pdf"})

        result = rule.execute(RuleContext(data=self.data, current_selection=initial))

        assert result.success
        assert result.selection == initial | {"/photos/IMG_001 (copy).jpg"}
        assert result.affected_count == 1

    @pytest.mark.parametrize("pattern", ["photos", "IMG", ".jpg", "nothing"])
    def test_unmark_is_difference(self, pattern) -> None:
        """Test that unmarking removes matched paths from the selection."""
        rule = self.create_rule(pattern=pattern)
        initial = frozenset(PATHS[1:])
        matched = {p for p in PATHS if pattern.lower() in p.lower()}

        result = rule.execute(
            RuleContext(data=self.data, current_selection=initial, action=SelectionAction.UNMARK)
        )

        assert result.selection == initial - matched

    def test_unmark_with_keep_existing_is_noop(self) -> None:
        """Test that unmarking leaves the selection alone when keep-existing is set."""
        rule = self.create_rule(pattern="photos", keep_existing_selection=True)
        initial = frozenset(PATHS)

        result = rule.execute(
            RuleContext(data=self.data, current_selection=initial, action=SelectionAction.UNMARK)
        )

        assert result.success
        assert result.selection == initial
        assert result.affected_count == 0

    def test_keep_existing_from_context(self) -> None:
        """Test that the context flag also turns unmark into a no-op."""
        rule = self.create_rule(pattern="photos")
        initial = frozenset(PATHS)
        context = RuleContext(
            data=self.data,
            current_selection=initial,
            action=SelectionAction.UNMARK,
            keep_existing_selection=True,
        )

        assert rule.execute(context).selection == initial

    def test_mark_with_keep_existing_is_superset(self) -> None:
        """Test that marking never drops existing paths."""
        rule = self.create_rule(pattern="backup", keep_existing_selection=True)
        initial = frozenset({"/docs/report.pdf"})

        result = rule.execute(RuleContext(data=self.data, current_selection=initial))

        assert initial <= result.selection

    def test_file_name_column(self) -> None:
        """Test matching against the file name only."""
        rule = self.create_rule(
            column=TextColumn.FILE_NAME, condition=TextCondition.EQUALS, pattern="img_001.jpg"
        )

        result = rule.execute(RuleContext(data=self.data))

        assert result.selection == {"/photos/IMG_001.jpg", "/backup/photos/IMG_001.jpg"}

    def test_folder_path_column_case_sensitive(self) -> None:
        """Test case-sensitive matching on the folder column."""
        rule = self.create_rule(
            column=TextColumn.FOLDER_PATH,
            condition=TextCondition.STARTS_WITH,
            pattern="/Backup",
            case_sensitive=True,
        )

        assert rule.execute(RuleContext(data=self.data)).selection == frozenset()

    def test_regex_pattern(self) -> None:
        """Test regex matching."""
        rule = self.create_rule(pattern=r"\(copy\)\.jpg$", use_regex=True)

        result = rule.execute(RuleContext(data=self.data))

        assert result.selection == {"/photos/IMG_001 (copy).jpg"}

    def test_empty_pattern_fails_validation(self) -> None:
        """Test that executing with an empty pattern reports an error."""
        rule = self.create_rule(pattern="")
        initial = frozenset({"/docs/report.pdf"})

        result = rule.execute(RuleContext(data=self.data, current_selection=initial))

        assert result.success is False
        assert result.selection == initial
        assert "Pattern must not be empty" in result.error

    def test_invalid_regex_fails_validation(self) -> None:
        """Test that an unparsable regex is rejected before execution."""
        rule = self.create_rule(pattern="([", use_regex=True)

        validation = rule.validate()

        assert not validation.valid
        assert validation.errors == ["Invalid regular expression: (["]

    def test_invalid_enums_fail_validation(self) -> None:
        """Test that unknown columns and conditions are reported."""
        rule = TextRule({"column": "extension", "condition": "like", "pattern": "x"})

        validation = rule.validate()

        assert validation.errors == ["Invalid column: extension", "Invalid condition: like"]

    def test_describe(self) -> None:
        """Test the human readable summary."""
        rule = self.create_rule(pattern="tmp", use_regex=True, case_sensitive=True)

        assert rule.describe() == 'fullPath contains "tmp" (regex) (case-sensitive)'
