"""Add command implementation."""

# ============================================================
# Imports
# ============================================================

from dataclasses import replace
from pathlib import Path

from .config import Config, load_mappings, save_mappings
from .errors import BothPathsExist, InvalidMapping, OutsideValidDir
from .executor import LinkExecutor, make_executor
from .filesystem import lexical_absolute
from .models import LinkStatus, Mapping, MappingStatus, Operation, TargetKind
from .output import (
    Color,
    print_error,
    print_info,
    print_report,
    print_status_line,
    print_success,
)
from .planner import plan
from .reconcile import inspect_mapping
from .store import normalize_relative_path

# Arguments starting with these name a file on disk rather than a mapping path
EXPLICIT_PREFIXES = ('/', '~', './', '../')


# ============================================================
# Entry Point
# ============================================================

def execute_add(config: Config) -> int:
    """
    Declare a new mapping and link it.

    Process:
    1. Resolve the mapping and check it against the store
    2. Optionally move an existing home file into the dotfiles root
    3. Save the mapping file
    4. Link the new mapping

    Args:
        config: Configuration object with `source` and optional `target`

    Returns:
        Exit code derived from the link result

    Raises:
        DuplicateTarget: If the target is already declared
        NestedMapping: If the target overlaps another mapping
        OutsideValidDir: If a path on disk is outside the home and dotfiles directories
        BothPathsExist: If both copies exist and are not linked, unless forced
    """
    mapping, in_home = resolve_mapping(config)
    move = config.move or in_home

    # Add mapping to store
    store = load_mappings(config)
    store.add(mapping)

    executor = make_executor(config.filesystem, dry_run=config.dry_run, force=config.force)
    status = inspect_mapping(mapping, config.dotfiles_root, config.home_dir, config.filesystem)

    if not config.force and both_paths_exist(config, status):
        raise BothPathsExist(status.source_path, status.target_path)

    # Adopt the existing home file before declaring the mapping
    if move and status.status == LinkStatus.MISSING:
        adopted = adopt_target(config, executor, status)
        if adopted is None:
            return 1
        status = adopted

    if config.dry_run:
        print_info(f"Would add mapping {mapping}")
    else:
        save_mappings(config, store)
        print_success(f"Added mapping {mapping}")

    # Link the new mapping
    actions = plan(Operation.LINK, [mapping], [status])
    report = executor.execute(actions)
    print_report(report)
    return report.exit_code


# ============================================================
# Path Resolution
# ============================================================

def resolve_mapping(config: Config) -> tuple[Mapping, bool]:
    """
    Build the mapping to add from the command arguments.

    A plain relative SOURCE is a path inside the dotfiles root. An absolute
    path, or one starting with `~`, `./` or `../`, names a file on disk: it
    is resolved against the current directory and mapped relative to the
    dotfiles root or, failing that, the home directory. A file named inside
    the home directory is adopted as with `--move`.

    Returns:
        The mapping and whether the path was given inside the home directory
    """
    if not config.source.startswith(EXPLICIT_PREFIXES):
        source = normalize_relative_path(config.source)
        target = normalize_relative_path(config.target or config.source)
        return Mapping(source=source, target=target), False

    path = lexical_absolute(Path(config.source).expanduser())

    # The dotfiles root usually lives inside the home directory
    if path.is_relative_to(config.dotfiles_root):
        source = normalize_relative_path(path.relative_to(config.dotfiles_root).as_posix())
        target = normalize_relative_path(config.target) if config.target else source
        return Mapping(source=source, target=target), False

    if path.is_relative_to(config.home_dir):
        if config.target:
            raise InvalidMapping(config.target, "a target cannot be given for a file in the home directory")
        relative = normalize_relative_path(path.relative_to(config.home_dir).as_posix())
        return Mapping(source=relative, target=relative), True

    raise OutsideValidDir(path)


def both_paths_exist(config: Config, status: MappingStatus) -> bool:
    """Check whether the source exists next to an unrelated home copy."""
    if status.status != LinkStatus.CONFLICT:
        return False
    if config.filesystem.symlinked_ancestor(config.home_dir, status.target_path) is not None:
        return False
    return config.filesystem.probe(status.target_path).kind == TargetKind.OTHER


# ============================================================
# Adoption
# ============================================================

def adopt_target(config: Config, executor: LinkExecutor, status: MappingStatus) -> MappingStatus | None:
    """
    Move the home copy of a missing source into the dotfiles root.

    Returns:
        The status to plan from after the move, or None if the move failed
    """
    state = config.filesystem.probe(status.target_path)
    if state.kind != TargetKind.OTHER:
        return status

    label = str(status.mapping.target)
    try:
        executor.adopt(status.target_path, status.source_path)
    except OSError as e:
        print_error(f"could not move {status.target_path} -> {status.source_path}: {e}")
        return None

    if executor.dry_run:
        # Nothing moved, plan as if the home copy were already in place
        print_status_line(label, "Moved (Not executed)", Color.GREEN, str(status.source_path))
        return replace(status, status=LinkStatus.UNLINKED, detail="")

    print_status_line(label, "Moved", Color.GREEN, str(status.source_path))
    return inspect_mapping(status.mapping, config.dotfiles_root, config.home_dir, config.filesystem)
