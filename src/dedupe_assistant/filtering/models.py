"""Filter state models and filter results."""

from dataclasses import dataclass, field
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.models import Entry

GIB = 1024 * 1024 * 1024


class MarkStatusOption(StrEnum):
    MARKED = "marked"
    UNMARKED = "unmarked"
    GROUP_HAS_SOME_MARKED = "groupHasSomeMarked"
    GROUP_ALL_UNMARKED = "groupAllUnmarked"
    GROUP_SOME_NOT_ALL = "groupSomeNotAll"
    GROUP_ALL_MARKED = "groupAllMarked"
    PROTECTED = "protected"


class GroupMarkStatus(StrEnum):
    ALL_UNMARKED = "allUnmarked"
    SOME_MARKED = "someMarked"
    SOME_NOT_ALL = "someNotAll"
    ALL_MARKED = "allMarked"


class SizeUnit(StrEnum):
    B = "B"
    KB = "KB"
    MB = "MB"
    GB = "GB"
    TB = "TB"


class DatePreset(StrEnum):
    TODAY = "today"
    LAST_7_DAYS = "last7days"
    LAST_30_DAYS = "last30days"
    LAST_YEAR = "lastYear"
    CUSTOM = "custom"


class PathMatchMode(StrEnum):
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"


class AspectRatio(StrEnum):
    WIDESCREEN = "16:9"
    STANDARD = "4:3"
    SQUARE = "1:1"
    ANY = "any"


class ExtensionFilterMode(StrEnum):
    INCLUDE = "include"
    EXCLUDE = "exclude"


class FilterPreset(StrEnum):
    NONE = "none"
    LARGE_FILES_FIRST = "largeFilesFirst"
    SMALL_FILES_FIRST = "smallFilesFirst"
    RECENTLY_MODIFIED = "recentlyModified"
    OLD_FILES = "oldFiles"


class FilterModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MarkStatusFilterConfig(FilterModel):
    enabled: bool = False
    options: list[MarkStatusOption] = Field(default_factory=list)


class RangeFilterConfig(FilterModel):
    """Inclusive numeric range. Size ranges are in bytes; ``unit`` is for display."""

    enabled: bool = False
    min: float = Field(0, ge=0)
    max: float = Field(100 * GIB, ge=0)
    unit: SizeUnit | None = None


class ExtensionFilterConfig(FilterModel):
    enabled: bool = False
    extensions: list[str] = Field(default_factory=list)
    mode: ExtensionFilterMode = ExtensionFilterMode.INCLUDE


class DateFilterConfig(FilterModel):
    """Date window; custom bounds are epoch millis."""

    enabled: bool = False
    preset: DatePreset = DatePreset.CUSTOM
    start_date: int | None = None
    end_date: int | None = None


class PathFilterConfig(FilterModel):
    enabled: bool = False
    mode: PathMatchMode = PathMatchMode.CONTAINS
    pattern: str = ""
    case_sensitive: bool = False


class SimilarityFilterConfig(FilterModel):
    enabled: bool = False
    min: float = Field(0, ge=0, le=100)
    max: float = Field(100, ge=0, le=100)


class ResolutionFilterConfig(FilterModel):
    enabled: bool = False
    min_width: int | None = Field(None, ge=0)
    min_height: int | None = Field(None, ge=0)
    max_width: int | None = Field(None, ge=0)
    max_height: int | None = Field(None, ge=0)
    aspect_ratio: AspectRatio | None = AspectRatio.ANY


class FilterState(FilterModel):
    """
    Every filter category plus the view toggles.

    ``min <= max`` is not enforced; inverted ranges simply match nothing.
    """

    mark_status: MarkStatusFilterConfig = Field(default_factory=MarkStatusFilterConfig)
    group_count: RangeFilterConfig = Field(
        default_factory=lambda: RangeFilterConfig(min=2, max=100)
    )
    group_size: RangeFilterConfig = Field(
        default_factory=lambda: RangeFilterConfig(min=0, max=100 * GIB, unit=SizeUnit.MB)
    )
    file_size: RangeFilterConfig = Field(
        default_factory=lambda: RangeFilterConfig(min=0, max=100 * GIB, unit=SizeUnit.MB)
    )
    extension: ExtensionFilterConfig = Field(default_factory=ExtensionFilterConfig)
    modified_date: DateFilterConfig = Field(default_factory=DateFilterConfig)
    path: PathFilterConfig = Field(default_factory=PathFilterConfig)
    similarity: SimilarityFilterConfig = Field(default_factory=SimilarityFilterConfig)
    resolution: ResolutionFilterConfig = Field(default_factory=ResolutionFilterConfig)
    selection_only: bool = False
    show_all_in_filtered_groups: bool = True
    preset: FilterPreset = FilterPreset.NONE


@dataclass(frozen=True)
class FilterStats:
    """Summary of one filter application; recomputed every time."""

    total_items: int = 0
    filtered_items: int = 0
    total_groups: int = 0
    filtered_groups: int = 0
    total_size: int = 0
    filtered_size: int = 0
    active_filter_count: int = 0


@dataclass(frozen=True)
class FilterResult:
    filtered_data: list[Entry] = field(default_factory=list)
    stats: FilterStats = field(default_factory=FilterStats)
