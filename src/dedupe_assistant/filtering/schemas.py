"""Validation of filter state read from storage or shared presets."""

import logging
from typing import Any

from pydantic import ValidationError

from .models import FilterState

logger = logging.getLogger(__name__)


def parse_filter_state(payload: Any) -> FilterState | None:
    """
    Validate a persisted filter state.

    Args:
        payload: Mapping in the camelCase shape, or a FilterState

    Returns:
        The parsed state, or None when the payload is invalid
    """
    try:
        return FilterState.model_validate(payload)
    except ValidationError as e:
        logger.warning(f"Rejected filter state with {e.error_count()} error(s)")
        return None


def validate_filter_state(payload: Any) -> bool:
    return parse_filter_state(payload) is not None
