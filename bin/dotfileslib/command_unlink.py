"""Unlink command implementation."""

from .command_link import apply_operation
from .config import Config, load_mappings
from .models import Operation
from .output import print_report


def execute_unlink(config: Config) -> int:
    """Remove links that point at their declared sources."""
    store = load_mappings(config)
    report = apply_operation(config, Operation.UNLINK, store.mappings())
    print_report(report)
    return report.exit_code
