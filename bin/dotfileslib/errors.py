"""Errors that abort a dotfiles invocation."""

from pathlib import Path


class DotfilesError(Exception):
    """Base class for errors reported to the user as `Error: <message>`."""


class DuplicateTarget(DotfilesError):
    """A mapping with the same target path is already declared."""

    def __init__(self, target: Path):
        self.target = target
        super().__init__(f"a mapping for target {target} already exists")


class NotFound(DotfilesError):
    """No mapping is declared for the given target path."""

    def __init__(self, target: Path):
        self.target = target
        super().__init__(f"no mapping declared for target {target}")


class NestedMapping(DotfilesError):
    """A mapping target lies inside another mapping's target."""

    def __init__(self, nested: Path, parent: Path):
        self.nested = nested
        self.parent = parent
        super().__init__(
            f"the mapping {nested} is nested in the mapping {parent}; nested mappings are not supported"
        )


class InvalidMapping(DotfilesError):
    """A mapping path is absolute or escapes its root."""

    def __init__(self, path: str, reason: str):
        self.path = path
        super().__init__(f"invalid mapping path {path!r}: {reason}")


class ConfigError(DotfilesError):
    """The mapping file could not be read, parsed or written."""


class RootInaccessible(DotfilesError):
    """The dotfiles root is missing or not a directory."""

    def __init__(self, root: Path):
        self.root = root
        super().__init__(f"dotfiles root {root} is not an accessible directory")


class OutsideValidDir(DotfilesError):
    """A path given to `add` lies outside both the home and dotfiles directories."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"{path} must be inside your home or dotfiles directory")


class BothPathsExist(DotfilesError):
    """Both the dotfiles copy and an unlinked home copy of a path exist."""

    def __init__(self, source: Path, target: Path):
        self.source = source
        self.target = target
        super().__init__(
            f"both {source} and {target} already exist; remove one of them and run this command again"
        )
