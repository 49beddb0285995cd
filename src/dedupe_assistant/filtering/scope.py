"""Selection operations limited to the currently filtered entries."""

from collections.abc import Sequence, Set
from dataclasses import dataclass

from ..core.models import Entry


@dataclass(frozen=True)
class FilteredSelectionStats:
    total: int
    selected: int


def _paths(filtered: Sequence[Entry]) -> set[str]:
    return {entry.path for entry in filtered}


def select_all_filtered(filtered: Sequence[Entry], selection: Set[str]) -> frozenset[str]:
    """Add every visible path to the selection."""
    return frozenset(selection) | _paths(filtered)


def invert_selection_filtered(filtered: Sequence[Entry], selection: Set[str]) -> frozenset[str]:
    """Toggle every visible path; hidden selected paths stay selected."""
    return frozenset(selection) ^ _paths(filtered)


def deselect_all_filtered(filtered: Sequence[Entry], selection: Set[str]) -> frozenset[str]:
    """Remove every visible path from the selection."""
    return frozenset(selection) - _paths(filtered)


def get_selected_in_filtered(filtered: Sequence[Entry], selection: Set[str]) -> list[Entry]:
    return [entry for entry in filtered if entry.path in selection]


def get_filtered_selection_stats(
    filtered: Sequence[Entry], selection: Set[str]
) -> FilteredSelectionStats:
    return FilteredSelectionStats(
        total=len(filtered),
        selected=len(get_selected_in_filtered(filtered, selection)),
    )


def is_all_filtered_selected(filtered: Sequence[Entry], selection: Set[str]) -> bool:
    """Whether every visible entry is selected; False for an empty view."""
    if not filtered:
        return False
    return all(entry.path in selection for entry in filtered)


def is_any_filtered_selected(filtered: Sequence[Entry], selection: Set[str]) -> bool:
    return any(entry.path in selection for entry in filtered)
