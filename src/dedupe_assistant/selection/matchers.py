"""Text predicates and path decomposition shared by rules and filters."""

import re
from typing import assert_never

from .models import TextColumn, TextCondition


def _last_separator(path: str) -> int:
    return max(path.rfind("/"), path.rfind("\\"))


def is_valid_regex(pattern: str) -> bool:
    """Check whether a pattern compiles as a regular expression."""
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True


def match_text(
    text: str,
    pattern: str,
    condition: TextCondition,
    case_sensitive: bool = False,
    use_regex: bool = False,
) -> bool:
    """
    Test text against a pattern.

    An empty pattern never matches, so a blank rule cannot select everything.

    Args:
        text: Text to test
        pattern: Literal text, or a regular expression when ``use_regex`` is set
        condition: Literal comparison; ignored in regex mode
        case_sensitive: Compare case-sensitively
        use_regex: Search for the pattern as a regular expression

    Returns:
        True if the text matches, False otherwise (including invalid regexes)
    """
    if not pattern:
        return False

    if use_regex:
        flags = 0 if case_sensitive else re.IGNORECASE
        try:
            return re.search(pattern, text, flags) is not None
        except re.error:
            return False

    if not case_sensitive:
        text = text.lower()
        pattern = pattern.lower()

    match condition:
        case TextCondition.CONTAINS:
            return pattern in text
        case TextCondition.NOT_CONTAINS:
            return pattern not in text
        case TextCondition.EQUALS:
            return text == pattern
        case TextCondition.STARTS_WITH:
            return text.startswith(pattern)
        case TextCondition.ENDS_WITH:
            return text.endswith(pattern)
        case _:
            assert_never(condition)


def get_column_value(path: str, column: TextColumn) -> str:
    """
    Extract one column of a path.

    Args:
        path: Full file path, with ``/`` or ``\\`` separators
        column: Which part of the path to return

    Returns:
        The full path, the file name, or the parent folder ('' when there is none)
    """
    last_sep = _last_separator(path)
    match column:
        case TextColumn.FULL_PATH:
            return path
        case TextColumn.FILE_NAME:
            return path[last_sep + 1 :] if last_sep >= 0 else path
        case TextColumn.FOLDER_PATH:
            return path[:last_sep] if last_sep > 0 else ""
        case _:
            assert_never(column)


def get_directory(path: str) -> str:
    """Parent directory of a path, or '' when it has none."""
    return get_column_value(path, TextColumn.FOLDER_PATH)


def _normalize(path: str) -> str:
    return path.replace("\\", "/").lower()


def is_in_directory(path: str, directory: str) -> bool:
    """
    Check whether a path is the directory itself or lies anywhere below it.

    Separators and case are normalized on both sides. An empty directory stands for
    the root: absolute paths and bare file names lie in it.
    """
    normalized_path = _normalize(path)
    normalized_dir = _normalize(directory).rstrip("/")
    if not normalized_dir:
        return normalized_path.startswith("/") or get_directory(normalized_path) == ""

    if normalized_path == normalized_dir:
        return True
    if normalized_path.startswith(normalized_dir + "/"):
        return True
    return get_directory(normalized_path) == normalized_dir
