"""Filesystem access for probing and mutating link targets."""

# ============================================================
# Imports
# ============================================================

import logging
import os
import shutil
import stat
from abc import ABC, abstractmethod
from pathlib import Path

from .models import TargetState

logger = logging.getLogger(__name__)


# ============================================================
# Path Helpers
# ============================================================

def lexical_absolute(path: Path) -> Path:
    """Make a path absolute and normalise it without resolving symlinks."""
    return Path(os.path.normpath(os.path.abspath(path)))


def absolute_link_target(link_path: Path, raw_target: str) -> Path:
    """Interpret a raw readlink value relative to the directory holding the link."""
    target = Path(raw_target)
    if not target.is_absolute():
        target = link_path.parent / target
    return Path(os.path.normpath(target))


# ============================================================
# Capability Interface
# ============================================================

class Filesystem(ABC):
    """
    Operations the reconciliation core needs from a filesystem.

    Reads (`probe`, `exists`, `symlinked_ancestor`) never follow the target
    symlink itself. Writes raise `OSError` subclasses; callers decide how to
    report them.
    """

    @abstractmethod
    def probe(self, path: Path) -> TargetState:
        """Classify a path as absent, a symlink (dangling or not) or another file."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Check whether a path exists, following symlinks."""

    @abstractmethod
    def symlinked_ancestor(self, root: Path, path: Path) -> Path | None:
        """Return the first directory strictly between root and path that is a symlink."""

    @abstractmethod
    def make_dirs(self, path: Path) -> None:
        """Create a directory and its parents if missing."""

    @abstractmethod
    def create_symlink(self, path: Path, destination: Path) -> None:
        """Create a symlink at path, failing with FileExistsError if anything is there."""

    @abstractmethod
    def remove_symlink(self, path: Path) -> None:
        """Remove a symlink without touching what it points to."""

    @abstractmethod
    def remove_path(self, path: Path) -> None:
        """Remove a file, symlink or directory tree."""

    @abstractmethod
    def move(self, source: Path, destination: Path) -> None:
        """Move a file or directory to a new location."""


# ============================================================
# Local Filesystem
# ============================================================

class LocalFilesystem(Filesystem):
    """Filesystem backed by the real disk."""

    def probe(self, path: Path) -> TargetState:
        # Use lstat so a correctly placed link to a vanished source is not "absent"
        try:
            info = os.lstat(path)
        except FileNotFoundError:
            return TargetState.absent()
        except NotADirectoryError:
            # A parent component is a regular file
            return TargetState.other_file()

        if stat.S_ISLNK(info.st_mode):
            link_target = absolute_link_target(path, os.readlink(path))
            return TargetState.symlink_to(link_target)

        return TargetState.other_file()

    def exists(self, path: Path) -> bool:
        return path.exists()

    def symlinked_ancestor(self, root: Path, path: Path) -> Path | None:
        try:
            relative = path.relative_to(root)
        except ValueError:
            return None

        # Walk directory components from the root down
        current = root
        for part in relative.parts[:-1]:
            current = current / part
            if current.is_symlink():
                return current
            if not current.exists():
                return None
        return None

    def make_dirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def create_symlink(self, path: Path, destination: Path) -> None:
        # os.symlink never replaces an existing entry
        os.symlink(destination, path)
        logger.debug("Created symlink %s -> %s", path, destination)

    def remove_symlink(self, path: Path) -> None:
        os.unlink(path)
        logger.debug("Removed symlink %s", path)

    def remove_path(self, path: Path) -> None:
        info = os.lstat(path)
        if stat.S_ISDIR(info.st_mode):
            shutil.rmtree(path)
        else:
            os.unlink(path)
        logger.debug("Removed %s", path)

    def move(self, source: Path, destination: Path) -> None:
        shutil.move(source, destination)
        logger.debug("Moved %s -> %s", source, destination)
