"""Formatted output utilities."""

# ============================================================
# Imports
# ============================================================

import json
import sys

from .models import (
    ActionOutcome,
    ActionResult,
    ExecutionReport,
    LinkStatus,
    MappingStatus,
)


# ============================================================
# Configuration
# ============================================================

class Color:
    """ANSI color codes for terminal output."""

    RESET = '\033[0m'
    BOLD = '\033[1m'
    CYAN = '\033[36m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    RED = '\033[31m'
    BLUE = '\033[34m'
    GRAY = '\033[90m'


STATUS_COLORS = {
    LinkStatus.LINKED: Color.GREEN,
    LinkStatus.UNLINKED: Color.YELLOW,
    LinkStatus.MISSING: Color.RED,
    LinkStatus.CONFLICT: Color.RED,
}

OUTCOME_COLORS = {
    ActionOutcome.CREATED: Color.GREEN,
    ActionOutcome.CREATED_DRYRUN: Color.GREEN,
    ActionOutcome.REPLACED: Color.GREEN,
    ActionOutcome.REPLACED_DRYRUN: Color.GREEN,
    ActionOutcome.REMOVED: Color.YELLOW,
    ActionOutcome.REMOVED_DRYRUN: Color.YELLOW,
    ActionOutcome.UNCHANGED: Color.GRAY,
    ActionOutcome.SKIPPED_SOURCE_MISSING: Color.YELLOW,
}


# ============================================================
# Output Functions
# ============================================================

def print_info(message: str) -> None:
    """Print an informational message."""
    print(message)


def print_error(message: str) -> None:
    """Print an error message to stderr with 'Error:' prefix."""
    print(f"Error: {message}", file=sys.stderr)


def print_success(message: str) -> None:
    """Print a success message in green."""
    print(f"{Color.GREEN}{message}{Color.RESET}")


def print_status_line(label: str, status: str, status_color: str, detail: str, monochrome: bool = False) -> None:
    """
    Print a formatted per-mapping status line.

    Args:
        label: Mapping label, usually the target path
        status: Status text (e.g., "Linked", "Created")
        status_color: Color constant for the status
        detail: Text printed after the arrow, omitted when empty
        monochrome: If True, use status_color for the entire line
    """
    suffix = f" -> {detail}" if detail else ""
    if monochrome:
        print(f"{status_color}[{label}] {status}{suffix}{Color.RESET}")
    else:
        print(f"[{Color.CYAN}{label}{Color.RESET}] {status_color}{status}{Color.RESET}{suffix}")


# ============================================================
# Domain Output
# ============================================================

def print_mapping_status(status: MappingStatus) -> None:
    """Print the reconciled status of one mapping."""
    detail = status.detail or str(status.source_path)
    print_status_line(str(status.mapping.target), status.status.value, STATUS_COLORS[status.status], detail)


def print_action_result(result: ActionResult) -> None:
    """Print the outcome of one executed action."""
    label = str(result.action.mapping.target)
    color = OUTCOME_COLORS.get(result.outcome, Color.RED)

    if result.outcome == ActionOutcome.UNCHANGED:
        print_status_line(label, result.outcome.value, color, str(result.target_path), monochrome=True)
    elif result.outcome == ActionOutcome.SKIPPED_SOURCE_MISSING or not result.is_success():
        print_status_line(label, result.outcome.value, color, result.error or result.action.warning or "")
    else:
        print_status_line(label, result.outcome.value, color, str(result.target_path))


def print_report(report: ExecutionReport) -> None:
    """Print every result followed by a one-line summary."""
    for result in report.results:
        print_action_result(result)

    failures = report.failures
    if failures:
        print_error(f"{len(failures)} of {len(report.results)} mappings failed")
    elif report.dry_run:
        print_info("Dry run, no changes made")


def print_status_json(statuses: list[MappingStatus]) -> None:
    """Print statuses as a JSON array for scripting."""
    payload = [
        {
            'source': status.mapping.source.as_posix(),
            'target': status.mapping.target.as_posix(),
            'status': status.status.value,
            'detail': status.detail,
        }
        for status in statuses
    ]
    print(json.dumps(payload, indent=2))
