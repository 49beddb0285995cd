"""Named filter presets."""

import logging
from typing import Any

from .models import DatePreset, FilterPreset, FilterState, SizeUnit
from .utils import days_ago

logger = logging.getLogger(__name__)

MIB = 1024 * 1024
GIB = 1024 * MIB

PRESET_CONFIGS: dict[FilterPreset, dict[str, Any]] = {
    FilterPreset.NONE: {},
    FilterPreset.LARGE_FILES_FIRST: {
        "file_size": {"enabled": True, "min": 100 * MIB, "max": 100 * GIB, "unit": SizeUnit.MB},
    },
    FilterPreset.SMALL_FILES_FIRST: {
        "file_size": {"enabled": True, "min": 0, "max": 1 * MIB, "unit": SizeUnit.KB},
    },
    FilterPreset.RECENTLY_MODIFIED: {
        "modified_date": {"enabled": True, "preset": DatePreset.LAST_30_DAYS},
    },
    # The end of the window is filled in when the preset is applied
    FilterPreset.OLD_FILES: {
        "modified_date": {"enabled": True, "preset": DatePreset.CUSTOM, "start_date": 0},
    },
}

PRESET_DISPLAY_NAMES: dict[FilterPreset, str] = {
    FilterPreset.NONE: "None",
    FilterPreset.LARGE_FILES_FIRST: "Large files first",
    FilterPreset.SMALL_FILES_FIRST: "Small files first",
    FilterPreset.RECENTLY_MODIFIED: "Recently modified",
    FilterPreset.OLD_FILES: "Old files",
}


def default_filter_state() -> FilterState:
    """A fresh filter state with every filter disabled."""
    return FilterState()


def apply_preset(current: FilterState, preset: FilterPreset, now: int | None = None) -> FilterState:
    """
    Switch to a preset.

    Presets do not stack: the result starts from the default state, so ``current`` only
    matters to callers that want to compare before and after.

    Args:
        current: Filter state before the switch
        preset: Preset to apply
        now: Current time in epoch millis; the system clock when omitted

    Returns:
        New filter state tagged with ``preset``
    """
    overrides = {key: dict(value) for key, value in PRESET_CONFIGS[preset].items()}
    if preset == FilterPreset.OLD_FILES:
        overrides["modified_date"]["end_date"] = days_ago(365, now=now)

    state = FilterState.model_validate({**overrides, "preset": preset})
    if state.preset != current.preset:
        logger.info(f"Filter preset changed from {current.preset} to {preset}")
    return state


def get_preset_display_name(preset: FilterPreset) -> str:
    return PRESET_DISPLAY_NAMES[preset]


def reset_filter_state() -> FilterState:
    return default_filter_state()
