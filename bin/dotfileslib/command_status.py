"""Status command implementation."""

# ============================================================
# Imports
# ============================================================

from .config import Config, load_mappings
from .output import print_info, print_mapping_status, print_status_json
from .reconcile import classify_all


# ============================================================
# Entry Point
# ============================================================

def execute_status(config: Config) -> int:
    """
    Print the reconciled status of every declared mapping.

    Status never mutates the filesystem and exits 0 whenever the mappings
    could be loaded, conflicts included.
    """
    store = load_mappings(config)
    statuses = classify_all(store.mappings(), config.dotfiles_root, config.home_dir, config.filesystem)

    # Machine readable output
    if config.json:
        print_status_json(statuses)
        return 0

    if not statuses:
        print_info(f"No mappings declared in {config.config_file}")
        return 0

    for status in statuses:
        print_mapping_status(status)

    return 0
