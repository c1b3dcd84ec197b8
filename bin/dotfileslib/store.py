"""In-memory store of declared mappings."""

# ============================================================
# Imports
# ============================================================

import logging
from collections.abc import Iterator
from pathlib import Path, PurePosixPath

from .errors import DuplicateTarget, InvalidMapping, NestedMapping, NotFound
from .models import Mapping

logger = logging.getLogger(__name__)


# ============================================================
# Path Normalisation
# ============================================================

def normalize_relative_path(value: str | Path) -> Path:
    """
    Normalise a mapping path so equal paths compare equal.

    Strips leading `./` and redundant separators. Absolute paths and `..`
    components are rejected since mappings must stay inside their root.

    Args:
        value: Path as written in the mapping file or on the command line

    Returns:
        Relative path without `.` components

    Raises:
        InvalidMapping: If the path is empty, absolute or escapes its root
    """
    raw = str(value)
    path = PurePosixPath(raw)

    if path.is_absolute():
        raise InvalidMapping(raw, "mappings must be relative")

    parts = [part for part in path.parts if part != '.']
    if '..' in parts:
        raise InvalidMapping(raw, "'..' is not allowed")
    if not parts:
        raise InvalidMapping(raw, "path is empty")

    return Path(*parts)


# ============================================================
# Mapping Store
# ============================================================

class MappingStore:
    """
    Ordered set of mappings keyed by target path.

    Insertion order is preserved so status output and plans are stable
    across runs.
    """

    def __init__(self, mappings: list[Mapping] | None = None):
        self._mappings: dict[Path, Mapping] = {}
        for mapping in mappings or []:
            self.add(mapping)

    def add(self, mapping: Mapping) -> None:
        """
        Declare a new mapping.

        Raises:
            DuplicateTarget: If the target is already declared
            NestedMapping: If the target is inside, or contains, another target
        """
        # Reject duplicate targets
        if mapping.target in self._mappings:
            raise DuplicateTarget(mapping.target)

        # Reject targets that overlap an existing target
        for existing in self._mappings.values():
            if mapping.target.is_relative_to(existing.target):
                raise NestedMapping(mapping.target, existing.target)
            if existing.target.is_relative_to(mapping.target):
                raise NestedMapping(existing.target, mapping.target)

        self._mappings[mapping.target] = mapping
        logger.debug("Declared mapping %s", mapping)

    def remove(self, target: Path) -> Mapping:
        """
        Remove the mapping for a target path and return it.

        Raises:
            NotFound: If no mapping has this target; the store is left unchanged
        """
        try:
            mapping = self._mappings.pop(target)
        except KeyError:
            raise NotFound(target) from None

        logger.debug("Removed mapping %s", mapping)
        return mapping

    def get(self, target: Path) -> Mapping:
        """Return the mapping for a target path or raise NotFound."""
        try:
            return self._mappings[target]
        except KeyError:
            raise NotFound(target) from None

    def mappings(self) -> list[Mapping]:
        """Return a snapshot of the mappings in insertion order."""
        return list(self._mappings.values())

    def __contains__(self, target: object) -> bool:
        return target in self._mappings

    def __iter__(self) -> Iterator[Mapping]:
        return iter(self.mappings())

    def __len__(self) -> int:
        return len(self._mappings)
