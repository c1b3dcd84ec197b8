"""Domain models for dotfiles link management."""

# ============================================================
# Imports
# ============================================================

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


# ============================================================
# Enums
# ============================================================

class LinkStatus(Enum):
    """Reconciled state of a declared mapping."""

    LINKED = "Linked"
    UNLINKED = "Unlinked"
    MISSING = "Missing"
    CONFLICT = "Conflict"


class TargetKind(Enum):
    """What the prober found at a target path."""

    ABSENT = "absent"
    SYMLINK = "symlink"
    OTHER = "other"


class Operation(Enum):
    """Operations the planner understands."""

    STATUS = "status"
    LINK = "link"
    UNLINK = "unlink"


class ActionKind(Enum):
    """Filesystem action planned for one mapping."""

    CREATE_LINK = "CreateLink"
    REMOVE_LINK = "RemoveLink"
    NOOP = "Noop"


class ActionOutcome(Enum):
    """Outcome of executing a planned action."""

    CREATED = "Created"
    CREATED_DRYRUN = "Created (Not executed)"
    REPLACED = "Replaced"
    REPLACED_DRYRUN = "Replaced (Not executed)"
    REMOVED = "Removed"
    REMOVED_DRYRUN = "Removed (Not executed)"
    UNCHANGED = "Unchanged"
    SKIPPED_SOURCE_MISSING = "Skipped (source missing)"
    REFUSED_CONFLICT = "Refused (conflict, use --force)"
    REFUSED_UNSAFE = "Refused (unsafe to replace)"
    RACE_CONFLICT = "Refused (changed since planning)"
    PERMISSION_DENIED = "Failed (permission denied)"
    IO_FAILURE = "Failed (I/O error)"


SUCCESS_OUTCOMES = frozenset({
    ActionOutcome.CREATED,
    ActionOutcome.CREATED_DRYRUN,
    ActionOutcome.REPLACED,
    ActionOutcome.REPLACED_DRYRUN,
    ActionOutcome.REMOVED,
    ActionOutcome.REMOVED_DRYRUN,
    ActionOutcome.UNCHANGED,
    ActionOutcome.SKIPPED_SOURCE_MISSING,
})


# ============================================================
# Mapping Models
# ============================================================

@dataclass(frozen=True)
class Mapping:
    """
    A declared link from the dotfiles root into the home directory.

    Attributes:
        source: Path relative to the dotfiles root
        target: Path relative to the home directory
    """

    source: Path
    target: Path

    def resolve_source_path(self, dotfiles_root: Path) -> Path:
        """Return the absolute source path inside the dotfiles root."""
        return dotfiles_root / self.source

    def resolve_target_path(self, home_dir: Path) -> Path:
        """Return the absolute target path inside the home directory."""
        return home_dir / self.target

    def __str__(self) -> str:
        if self.source == self.target:
            return str(self.target)
        return f"{self.target} <- {self.source}"


@dataclass(frozen=True)
class TargetState:
    """
    Link-aware observation of a single target path.

    Attributes:
        kind: Absent, symlink or any other file type
        link_target: Absolute, lexically normalised destination for symlinks
    """

    kind: TargetKind
    link_target: Path | None = None

    @classmethod
    def absent(cls) -> 'TargetState':
        return cls(kind=TargetKind.ABSENT)

    @classmethod
    def symlink_to(cls, link_target: Path) -> 'TargetState':
        return cls(kind=TargetKind.SYMLINK, link_target=link_target)

    @classmethod
    def other_file(cls) -> 'TargetState':
        return cls(kind=TargetKind.OTHER)


@dataclass(frozen=True)
class MappingStatus:
    """
    Classification of one mapping together with the paths it was computed from.

    Attributes:
        mapping: The declared mapping
        status: Reconciled link status
        source_path: Absolute expected source
        target_path: Absolute target in the home directory
        detail: Human readable reason for Missing and Conflict
    """

    mapping: Mapping
    status: LinkStatus
    source_path: Path
    target_path: Path
    detail: str = ""


# ============================================================
# Action Models
# ============================================================

@dataclass(frozen=True)
class PlannedAction:
    """
    A filesystem action the executor should perform for one mapping.

    Attributes:
        mapping: The mapping this action belongs to
        kind: Action to perform
        source_path: Absolute expected source
        target_path: Absolute target path
        requires_force: Whether the action overwrites a conflicting target
        warning: Reason surfaced to the user for a skipped mapping
    """

    mapping: Mapping
    kind: ActionKind
    source_path: Path
    target_path: Path
    requires_force: bool = False
    warning: str | None = None

    @property
    def home_dir(self) -> Path:
        """Directory the relative target was resolved against."""
        return self.target_path.parents[len(self.mapping.target.parts) - 1]


@dataclass(frozen=True)
class ActionResult:
    """
    Result of executing one planned action.

    Attributes:
        action: The action that was executed
        outcome: What happened
        error: OS error message for failed actions
    """

    action: PlannedAction
    outcome: ActionOutcome
    error: str | None = None

    @property
    def target_path(self) -> Path:
        """Get the target path from the action."""
        return self.action.target_path

    def is_success(self) -> bool:
        """Check if the action completed or was a harmless skip."""
        return self.outcome in SUCCESS_OUTCOMES


@dataclass
class ExecutionReport:
    """Per-action results of one execution, in planning order."""

    results: list[ActionResult] = field(default_factory=list)
    dry_run: bool = False

    def add(self, result: ActionResult) -> None:
        self.results.append(result)

    @property
    def failures(self) -> list[ActionResult]:
        return [result for result in self.results if not result.is_success()]

    @property
    def succeeded(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
