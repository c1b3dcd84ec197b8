"""Execution of planned link actions."""

# ============================================================
# Imports
# ============================================================

import logging
from pathlib import Path

from .filesystem import Filesystem
from .models import (
    ActionKind,
    ActionOutcome,
    ActionResult,
    ExecutionReport,
    PlannedAction,
    TargetKind,
    TargetState,
)

logger = logging.getLogger(__name__)


# ============================================================
# Live Executor
# ============================================================

class LinkExecutor:
    """
    Apply planned actions to the filesystem one mapping at a time.

    Preconditions are re-checked right before each mutation. A failure on
    one mapping is recorded in its result and the batch carries on.
    """

    dry_run = False

    def __init__(self, filesystem: Filesystem, force: bool = False):
        self.filesystem = filesystem
        self.force = force

    def execute(self, actions: list[PlannedAction]) -> ExecutionReport:
        """Execute actions in order and collect their results."""
        report = ExecutionReport(dry_run=self.dry_run)
        for action in actions:
            report.add(self.execute_action(action))
        return report

    def execute_action(self, action: PlannedAction) -> ActionResult:
        """Execute a single action, converting OS errors into outcomes."""
        if action.kind == ActionKind.NOOP:
            outcome = ActionOutcome.SKIPPED_SOURCE_MISSING if action.warning else ActionOutcome.UNCHANGED
            return ActionResult(action=action, outcome=outcome)

        try:
            if action.kind == ActionKind.CREATE_LINK:
                return self.create_link(action)
            return self.remove_link(action)
        except PermissionError as e:
            logger.debug("Permission denied for %s: %s", action.target_path, e)
            return ActionResult(action=action, outcome=ActionOutcome.PERMISSION_DENIED, error=str(e))
        except OSError as e:
            logger.debug("I/O failure for %s: %s", action.target_path, e)
            return ActionResult(action=action, outcome=ActionOutcome.IO_FAILURE, error=str(e))

    # ------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------

    def create_link(self, action: PlannedAction) -> ActionResult:
        """
        Create the link for an action, replacing the target only when forced.

        A target reached through a symlinked directory is never written, not
        even with force: the real file behind it may be the source itself.
        """
        ancestor = self.filesystem.symlinked_ancestor(action.home_dir, action.target_path)
        if ancestor is not None:
            return self.refuse_unsafe(action, f"{ancestor} is a symlinked directory")

        # Conflicts are only overwritten with explicit authorisation
        if action.requires_force and not self.force:
            return ActionResult(action=action, outcome=ActionOutcome.REFUSED_CONFLICT, error=action.warning)

        state = self.probe(action.target_path)
        replaced = False

        if state.kind == TargetKind.SYMLINK and state.link_target == action.source_path:
            return ActionResult(action=action, outcome=ActionOutcome.UNCHANGED)

        if state.kind != TargetKind.ABSENT:
            # Something appeared since planning
            if not action.requires_force:
                return self.race(action, f"{action.target_path} appeared since planning")
            if overlaps(action.target_path, action.source_path):
                return self.refuse_unsafe(action, f"replacing {action.target_path} would remove {action.source_path}")
            self.remove_existing(action.target_path)
            replaced = True

        self.make_parent_dirs(action.target_path.parent)

        try:
            self.link(action.target_path, action.source_path)
        except FileExistsError:
            return self.race(action, f"{action.target_path} appeared before the link was created")

        if replaced:
            outcome = self.select_outcome(ActionOutcome.REPLACED, ActionOutcome.REPLACED_DRYRUN)
        else:
            outcome = self.select_outcome(ActionOutcome.CREATED, ActionOutcome.CREATED_DRYRUN)
        return ActionResult(action=action, outcome=outcome)

    def remove_link(self, action: PlannedAction) -> ActionResult:
        """Remove a link only if it still points at the expected source."""
        state = self.probe(action.target_path)

        if state.kind != TargetKind.SYMLINK or state.link_target != action.source_path:
            return self.race(action, f"{action.target_path} no longer links to {action.source_path}")

        self.unlink(action.target_path)
        outcome = self.select_outcome(ActionOutcome.REMOVED, ActionOutcome.REMOVED_DRYRUN)
        return ActionResult(action=action, outcome=outcome)

    def adopt(self, target_path: Path, source_path: Path) -> None:
        """Move an existing home file into the dotfiles root."""
        self.make_parent_dirs(source_path.parent)
        self.move(target_path, source_path)

    # ------------------------------------------------------------
    # Filesystem Primitives
    # ------------------------------------------------------------

    def probe(self, path: Path) -> TargetState:
        return self.filesystem.probe(path)

    def make_parent_dirs(self, path: Path) -> None:
        self.filesystem.make_dirs(path)

    def link(self, path: Path, destination: Path) -> None:
        self.filesystem.create_symlink(path, destination)

    def unlink(self, path: Path) -> None:
        self.filesystem.remove_symlink(path)

    def remove_existing(self, path: Path) -> None:
        self.filesystem.remove_path(path)

    def move(self, source: Path, destination: Path) -> None:
        self.filesystem.move(source, destination)

    # ------------------------------------------------------------
    # Supporting Code
    # ------------------------------------------------------------

    def select_outcome(self, live: ActionOutcome, dryrun: ActionOutcome) -> ActionOutcome:
        return dryrun if self.dry_run else live

    def race(self, action: PlannedAction, message: str) -> ActionResult:
        logger.debug("Race detected: %s", message)
        return ActionResult(action=action, outcome=ActionOutcome.RACE_CONFLICT, error=message)

    def refuse_unsafe(self, action: PlannedAction, message: str) -> ActionResult:
        logger.debug("Refusing to replace %s: %s", action.target_path, message)
        return ActionResult(action=action, outcome=ActionOutcome.REFUSED_UNSAFE, error=message)


def overlaps(path: Path, other: Path) -> bool:
    """Check whether removing path would also remove other."""
    return other == path or other.is_relative_to(path)


# ============================================================
# Dry Run Executor
# ============================================================

class DryRunExecutor(LinkExecutor):
    """Executor that records mutations instead of performing them."""

    dry_run = True

    def __init__(self, filesystem: Filesystem, force: bool = False):
        super().__init__(filesystem, force)
        self.recorded: list[str] = []
        self.vacated: set[Path] = set()

    def probe(self, path: Path) -> TargetState:
        # Paths this run would have removed or moved away read as absent
        if path in self.vacated:
            return TargetState.absent()
        return super().probe(path)

    def make_parent_dirs(self, path: Path) -> None:
        if not self.filesystem.exists(path):
            self.recorded.append(f"mkdir -p {path}")

    def link(self, path: Path, destination: Path) -> None:
        self.recorded.append(f"ln -s {destination} {path}")

    def unlink(self, path: Path) -> None:
        self.recorded.append(f"rm {path}")
        self.vacated.add(path)

    def remove_existing(self, path: Path) -> None:
        self.recorded.append(f"rm -r {path}")
        self.vacated.add(path)

    def move(self, source: Path, destination: Path) -> None:
        self.recorded.append(f"mv {source} {destination}")
        self.vacated.add(source)


def make_executor(filesystem: Filesystem, dry_run: bool = False, force: bool = False) -> LinkExecutor:
    """Select the live or recording executor."""
    if dry_run:
        return DryRunExecutor(filesystem, force)
    return LinkExecutor(filesystem, force)
