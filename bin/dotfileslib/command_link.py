"""Link command implementation."""

# ============================================================
# Imports
# ============================================================

from .config import Config, load_mappings
from .executor import make_executor
from .models import ExecutionReport, Mapping, Operation
from .output import print_report
from .planner import plan
from .reconcile import classify_all


# ============================================================
# Entry Point
# ============================================================

def execute_link(config: Config) -> int:
    """Create missing links for all declared mappings."""
    store = load_mappings(config)
    report = apply_operation(config, Operation.LINK, store.mappings())
    print_report(report)
    return report.exit_code


# ============================================================
# Operations
# ============================================================

def apply_operation(config: Config, operation: Operation, mappings: list[Mapping]) -> ExecutionReport:
    """
    Classify, plan and execute an operation over the given mappings.

    Process:
    1. Classify each mapping against the filesystem
    2. Plan one action per mapping
    3. Execute the actions, or record them on a dry run

    Args:
        config: Configuration object
        operation: Link or unlink
        mappings: Mappings in store order

    Returns:
        Report with one result per mapping
    """
    statuses = classify_all(mappings, config.dotfiles_root, config.home_dir, config.filesystem)
    actions = plan(operation, mappings, statuses)
    executor = make_executor(config.filesystem, dry_run=config.dry_run, force=config.force)
    return executor.execute(actions)
