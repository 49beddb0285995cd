"""Directory rule: match paths by the directories they live in."""

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import assert_never

from ...core.models import Entry
from ..matchers import get_directory, is_in_directory
from ..models import DirectoryMode, DirectoryRuleConfig, RuleType, ValidationResult, is_member
from .base import SelectionRule

logger = logging.getLogger(__name__)

MODE_LABELS = {
    DirectoryMode.KEEP_ONE_PER_DIRECTORY: "Keep one per directory",
    DirectoryMode.SELECT_ALL_IN_DIRECTORY: "Select all in directory",
    DirectoryMode.EXCLUDE_DIRECTORY: "Exclude directory",
}

_DIRECTORY_MODES = {DirectoryMode.SELECT_ALL_IN_DIRECTORY, DirectoryMode.EXCLUDE_DIRECTORY}


def partition_groups(data: Sequence[Entry]) -> list[list[Entry]]:
    """Split entries into groups; each ungrouped entry forms a group of its own."""
    grouped: dict[int, list[Entry]] = defaultdict(list)
    groups: list[list[Entry]] = []
    for entry in data:
        if entry.group_id is None:
            groups.append([entry])
            continue
        if entry.group_id not in grouped:
            groups.append(grouped[entry.group_id])
        grouped[entry.group_id].append(entry)
    return groups


class DirectoryRule(SelectionRule):
    """Selects paths based on directory layout inside groups or configured directories."""

    rule_type = RuleType.DIRECTORY
    config_class = DirectoryRuleConfig
    config: DirectoryRuleConfig

    def find_matches(self, data: Sequence[Entry]) -> set[str]:
        mode = self.config.mode
        match mode:
            case DirectoryMode.KEEP_ONE_PER_DIRECTORY:
                return self._keep_one_per_directory(data)
            case DirectoryMode.SELECT_ALL_IN_DIRECTORY | DirectoryMode.EXCLUDE_DIRECTORY:
                directories = self.config.directories
                return {
                    entry.path
                    for entry in data
                    if any(is_in_directory(entry.path, directory) for directory in directories)
                }
            case _:
                assert_never(mode)

    def _keep_one_per_directory(self, data: Sequence[Entry]) -> set[str]:
        matched: set[str] = set()
        for group in partition_groups(data):
            by_directory: dict[str, list[Entry]] = defaultdict(list)
            for entry in group:
                by_directory[get_directory(entry.path)].append(entry)

            if len(by_directory) == 1:
                candidates = [entry for entry in group if not entry.is_ref] or group
                matched.update(entry.path for entry in candidates)
                continue

            for directory, entries in by_directory.items():
                if len(entries) > 1:
                    logger.debug(f"Directory {directory!r}: keeping {entries[0].path}")
                    matched.update(entry.path for entry in entries[1:])
        return matched

    def validate(self) -> ValidationResult:
        errors = []
        mode = self.config.mode
        if not is_member(DirectoryMode, mode):
            errors.append(f"Invalid directory mode: {mode}")
        elif mode in _DIRECTORY_MODES and not self.config.directories:
            errors.append(f"At least one directory is required for {mode}")
        return ValidationResult.from_errors(errors)

    def describe(self) -> str:
        label = MODE_LABELS.get(self.config.mode, str(self.config.mode))
        directories = self.config.directories
        if not directories:
            return label
        shown = ", ".join(directories[:2])
        if len(directories) > 2:
            shown += ", ..."
        return f"{label}: {shown}"
