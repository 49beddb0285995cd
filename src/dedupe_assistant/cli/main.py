"""CLI entry point for dedupe assistant."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .. import __version__
from ..core import ApplicationConfig, Entry
from ..filtering import (
    FilterPreset,
    FilterResult,
    FilterState,
    apply_filters,
    apply_preset,
    default_filter_state,
    get_preset_display_name,
    parse_filter_state,
    similarity_distribution,
)
from ..filtering.utils import format_bytes
from ..selection import RuleContext, RulePipeline, RuleResult, SelectionAction, import_config

_ENTRIES_ADAPTER = TypeAdapter(list[Entry])
_SELECTION_ADAPTER = TypeAdapter(list[str])


def setup_logging(level: str = "INFO") -> None:
    """
    Set up logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def read_text(path: Path) -> str:
    """Read a UTF-8 input file."""
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")
    return path.read_text(encoding="utf-8")


def load_entries(path: Path) -> list[Entry]:
    """Load scan entries from a JSON list."""
    try:
        return _ENTRIES_ADAPTER.validate_json(read_text(path))
    except ValidationError as e:
        raise ValueError(f"Invalid entries file {path}: {e.error_count()} error(s)") from e


def load_selection(path: Path | None) -> frozenset[str]:
    """Load selected paths from a JSON list; empty when no file is given."""
    if path is None:
        return frozenset()
    try:
        return frozenset(_SELECTION_ADAPTER.validate_json(read_text(path)))
    except ValidationError as e:
        raise ValueError(f"Invalid selection file {path}: {e.error_count()} error(s)") from e


def load_pipeline(rules_path: Path | None, pipeline_path: Path | None, name: str) -> RulePipeline | None:
    """
    Build the rule pipeline from an exported config or a serialized pipeline.

    Args:
        rules_path: Exported rule config JSON
        pipeline_path: Serialized pipeline JSON
        name: Pipeline name used for exported configs

    Returns:
        RulePipeline, or None when neither file is given
    """
    logger = logging.getLogger(__name__)

    if pipeline_path is not None:
        try:
            payload = json.loads(read_text(pipeline_path))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid pipeline file {pipeline_path}: {e}") from e
        if not isinstance(payload, dict):
            raise ValueError(f"Invalid pipeline file {pipeline_path}: expected an object")
        pipeline = RulePipeline.from_json(payload)
        logger.info(f"Loaded pipeline {pipeline.name!r} with {len(pipeline)} rules")
        return pipeline

    if rules_path is not None:
        result = import_config(read_text(rules_path))
        if not result.success:
            raise ValueError(f"Invalid rule config {rules_path}: {'; '.join(result.errors or [])}")
        return RulePipeline.from_config(result.config, name=name)

    return None


def load_filter_state(filters_path: Path | None, preset: str | None) -> FilterState | None:
    """Load a filter state file or build the state of a preset."""
    if filters_path is not None and preset is not None:
        raise ValueError("A filter file and a preset cannot be combined")

    if preset is not None:
        return apply_preset(default_filter_state(), FilterPreset(preset))
    if filters_path is None:
        return None

    try:
        payload = json.loads(read_text(filters_path))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid filter file {filters_path}: {e}") from e
    state = parse_filter_state(payload)
    if state is None:
        raise ValueError(f"Invalid filter state in {filters_path}")
    return state


def print_results(
    rule_result: RuleResult | None,
    filter_result: FilterResult | None,
    config: ApplicationConfig,
    entries: list[Entry],
) -> None:
    """
    Print a human readable summary.

    Args:
        rule_result: Pipeline outcome, if rules ran
        filter_result: Filter outcome, if filters ran
        config: Application settings
        entries: All loaded entries
    """
    print("\n" + "=" * 60)
    print("SELECTION RESULTS")
    print("=" * 60)
    print(f"Entries loaded: {len(entries)}")

    if rule_result is not None:
        print(f"Selected paths: {len(rule_result.selection)}")
        print(f"Affected paths: {rule_result.affected_count}")
        if rule_result.error:
            print(f"Errors: {rule_result.error}")

    if filter_result is not None:
        stats = filter_result.stats
        print("\n" + "-" * 60)
        print("FILTERED VIEW")
        print("-" * 60)
        print(f"Entries: {stats.filtered_items} of {stats.total_items}")
        print(f"Groups: {stats.filtered_groups} of {stats.total_groups}")
        print(f"Size: {format_bytes(stats.filtered_size)} of {format_bytes(stats.total_size)}")
        print(f"Active filters: {stats.active_filter_count}")

        distribution = similarity_distribution(filter_result.filtered_data, config.default_hash_size)
        levels = ", ".join(f"{level}: {count}" for level, count in distribution.items() if count)
        if levels:
            print(f"Similarity levels: {levels}")

    if rule_result is not None and rule_result.selection:
        print("\nSelected:")
        for path in sorted(rule_result.selection):
            print(f"  - {path}")


def results_to_json(
    rule_result: RuleResult | None, filter_result: FilterResult | None, selection: frozenset[str]
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "selection": sorted(rule_result.selection if rule_result else selection),
        "affectedCount": rule_result.affected_count if rule_result else 0,
        "success": rule_result.success if rule_result else True,
        "errors": rule_result.error.split("; ") if rule_result and rule_result.error else [],
    }
    if filter_result is not None:
        stats = filter_result.stats
        payload["filteredPaths"] = [entry.path for entry in filter_result.filtered_data]
        payload["stats"] = {
            "totalItems": stats.total_items,
            "filteredItems": stats.filtered_items,
            "totalGroups": stats.total_groups,
            "filteredGroups": stats.filtered_groups,
            "totalSize": stats.total_size,
            "filteredSize": stats.filtered_size,
            "activeFilterCount": stats.active_filter_count,
        }
    return payload


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    presets = ", ".join(f"{preset} ({get_preset_display_name(preset)})" for preset in FilterPreset)
    parser = argparse.ArgumentParser(
        description="Dedupe Assistant - Apply selection rules and filters to duplicate scan results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  # Run exported selection rules over a scan result
  dedupe-assistant scan.json --rules rules.json

  # Unmark paths matched by a saved pipeline, starting from a saved selection
  dedupe-assistant scan.json --pipeline pipeline.json --selection selected.json --action unmark

  # Show only large files, as JSON
  dedupe-assistant scan.json --preset largeFilesFirst --output-format json

Filter presets: {presets}
        """,
    )

    parser.add_argument("entries", type=Path, metavar="ENTRIES", help="Scan result entries (JSON list)")

    # Rule options
    rules = parser.add_mutually_exclusive_group()
    rules.add_argument("--rules", type=Path, metavar="FILE", help="Exported rule config to run")
    rules.add_argument("--pipeline", type=Path, metavar="FILE", help="Serialized rule pipeline to run")
    parser.add_argument("--selection", type=Path, metavar="FILE", help="Current selection (JSON list of paths)")
    parser.add_argument(
        "--action",
        choices=[action.value for action in SelectionAction],
        default=None,
        help="Whether rules mark or unmark matched paths (default: mark)",
    )
    parser.add_argument(
        "--keep-existing", action="store_true", help="Keep the current selection when marking"
    )

    # Filter options
    filters = parser.add_mutually_exclusive_group()
    filters.add_argument("--filters", type=Path, metavar="FILE", help="Filter state to apply (JSON)")
    filters.add_argument(
        "--preset", choices=[preset.value for preset in FilterPreset], help="Filter preset to apply"
    )

    # Output options
    parser.add_argument(
        "--output-format",
        choices=["text", "json"],
        default="text",
        help="Output format for results (default: text)",
    )

    # Logging options
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set logging level (default: INFO)",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI application.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    config = ApplicationConfig(
        log_level=args.log_level,
        default_action=args.action or "mark",
        keep_existing_selection=args.keep_existing,
    )
    if config.enable_logging:
        setup_logging(config.log_level)
    logger = logging.getLogger(__name__)

    try:
        entries = load_entries(args.entries)
        selection = load_selection(args.selection)
        pipeline = load_pipeline(args.rules, args.pipeline, config.pipeline_name)
        filter_state = load_filter_state(args.filters, args.preset)

        rule_result = None
        if pipeline is not None:
            context = RuleContext(
                data=entries,
                current_selection=selection,
                keep_existing_selection=config.keep_existing_selection,
                action=SelectionAction(config.default_action),
            )
            rule_result = pipeline.execute(context)
            selection = rule_result.selection

        filter_result = None
        if filter_state is not None:
            filter_result = apply_filters(entries, selection, filter_state)

        if args.output_format == "json":
            print(json.dumps(results_to_json(rule_result, filter_result, selection), indent=2))
        else:
            print_results(rule_result, filter_result, config, entries)

        if rule_result is not None and not rule_result.success:
            logger.warning(f"Pipeline finished with errors: {rule_result.error}")
            return 1
        return 0

    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        return 1
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1
    except Exception as e:
        logger.exception("Unexpected error occurred")
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
