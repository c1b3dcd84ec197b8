"""Remove command implementation."""

# ============================================================
# Imports
# ============================================================

from .command_link import apply_operation
from .config import Config, load_mappings, save_mappings
from .models import Operation
from .output import print_info, print_report, print_success
from .store import normalize_relative_path


# ============================================================
# Entry Point
# ============================================================

def execute_remove(config: Config) -> int:
    """
    Remove a mapping and unlink its target.

    The target is only unlinked when it still links to the declared source;
    anything else at the target is left alone.

    Raises:
        NotFound: If no mapping is declared for the target
    """
    target = normalize_relative_path(config.target)

    # Remove mapping from store
    store = load_mappings(config)
    mapping = store.remove(target)

    if config.dry_run:
        print_info(f"Would remove mapping {mapping}")
    else:
        save_mappings(config, store)
        print_success(f"Removed mapping {mapping}")

    # Unlink the removed mapping
    report = apply_operation(config, Operation.UNLINK, [mapping])
    print_report(report)
    return report.exit_code
