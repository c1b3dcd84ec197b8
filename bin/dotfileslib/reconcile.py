"""Classification of declared mappings against the filesystem."""

# ============================================================
# Imports
# ============================================================

import logging
from pathlib import Path

from .filesystem import Filesystem, lexical_absolute
from .models import LinkStatus, Mapping, MappingStatus, TargetKind

logger = logging.getLogger(__name__)


# ============================================================
# Classification
# ============================================================

def inspect_mapping(
    mapping: Mapping,
    dotfiles_root: Path,
    home_dir: Path,
    filesystem: Filesystem,
) -> MappingStatus:
    """
    Classify one mapping and explain the result.

    A missing source wins over any target state, so a link left dangling by
    a deleted source is reported as Missing rather than Linked. Paths are
    compared lexically because link targets may not exist. A path that
    cannot be inspected is reported as a Conflict carrying the OS error.

    Args:
        mapping: Declared mapping
        dotfiles_root: Dotfiles root, made absolute lexically
        home_dir: Home directory, made absolute lexically
        filesystem: Filesystem to probe

    Returns:
        MappingStatus with absolute paths and a detail for Missing/Conflict
    """
    dotfiles_root = lexical_absolute(dotfiles_root)
    home_dir = lexical_absolute(home_dir)
    source_path = lexical_absolute(mapping.resolve_source_path(dotfiles_root))
    target_path = lexical_absolute(mapping.resolve_target_path(home_dir))

    def result(status: LinkStatus, detail: str = "") -> MappingStatus:
        logger.debug("Classified %s as %s %s", mapping, status.value, detail)
        return MappingStatus(
            mapping=mapping,
            status=status,
            source_path=source_path,
            target_path=target_path,
            detail=detail,
        )

    try:
        # Source must exist before the target state matters
        if not filesystem.exists(source_path):
            return result(LinkStatus.MISSING, f"{source_path} does not exist")

        # Targets reached through a symlinked directory are ambiguous
        ancestor = filesystem.symlinked_ancestor(home_dir, target_path)
        if ancestor is not None:
            return result(LinkStatus.CONFLICT, f"{ancestor} is a symlinked directory")

        state = filesystem.probe(target_path)
    except OSError as e:
        return result(LinkStatus.CONFLICT, f"cannot inspect: {e}")

    if state.kind == TargetKind.ABSENT:
        return result(LinkStatus.UNLINKED)

    if state.kind == TargetKind.SYMLINK:
        if state.link_target == source_path:
            return result(LinkStatus.LINKED)
        return result(LinkStatus.CONFLICT, f"points to {state.link_target} instead")

    return result(LinkStatus.CONFLICT, f"{target_path} is not a symlink")


def classify(
    mapping: Mapping,
    dotfiles_root: Path,
    home_dir: Path,
    filesystem: Filesystem,
) -> LinkStatus:
    """Return only the LinkStatus of one mapping."""
    return inspect_mapping(mapping, dotfiles_root, home_dir, filesystem).status


def classify_all(
    mappings: list[Mapping],
    dotfiles_root: Path,
    home_dir: Path,
    filesystem: Filesystem,
) -> list[MappingStatus]:
    """Classify every mapping, preserving enumeration order."""
    return [
        inspect_mapping(mapping, dotfiles_root, home_dir, filesystem)
        for mapping in mappings
    ]
