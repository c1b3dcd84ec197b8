"""Tests for executing planned actions."""

from pathlib import Path

from dotfileslib.executor import DryRunExecutor, LinkExecutor, make_executor
from dotfileslib.models import (
    ActionKind,
    ActionOutcome,
    LinkStatus,
    Mapping,
    Operation,
    PlannedAction,
    TargetKind,
    TargetState,
)
from dotfileslib.planner import plan
from dotfileslib.reconcile import classify, classify_all
from memory_fs import DOTFILES_ROOT, HOME_DIR, MemoryFilesystem, UnreadableFilesystem

NVIM = Mapping(source=Path('nvim.conf'), target=Path('.config/nvim/init'))
BASHRC = Mapping(source=Path('bashrc'), target=Path('.bashrc'))


def plan_for(fs, operation, mappings):
    statuses = classify_all(mappings, DOTFILES_ROOT, HOME_DIR, fs)
    return plan(operation, mappings, statuses)


class RacingFilesystem(MemoryFilesystem):
    """Drops a user file at the target just before a link is created."""

    def create_symlink(self, path, destination):
        self.add_file(path, 'written concurrently')
        super().create_symlink(path, destination)


class ReadOnlyFilesystem(MemoryFilesystem):

    def create_symlink(self, path, destination):
        raise PermissionError(13, 'Permission denied', str(path))


class TestLinkScenario:
    """Classify, plan, execute, classify again."""

    def test_creates_nested_link(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'nvim.conf')
        assert classify(NVIM, DOTFILES_ROOT, HOME_DIR, memory_fs) == LinkStatus.UNLINKED

        actions = plan_for(memory_fs, Operation.LINK, [NVIM])
        assert [a.kind for a in actions] == [ActionKind.CREATE_LINK]

        report = LinkExecutor(memory_fs).execute(actions)

        assert report.succeeded
        assert report.results[0].outcome == ActionOutcome.CREATED
        assert memory_fs.probe(HOME_DIR / '.config/nvim/init') == TargetState.symlink_to(DOTFILES_ROOT / 'nvim.conf')
        assert classify(NVIM, DOTFILES_ROOT, HOME_DIR, memory_fs) == LinkStatus.LINKED

    def test_round_trip_links_every_unlinked_mapping(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'nvim.conf')
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        tmux = Mapping(source=Path('tmux.conf'), target=Path('.tmux.conf'))
        mappings = [NVIM, BASHRC, tmux]

        LinkExecutor(memory_fs).execute(plan_for(memory_fs, Operation.LINK, mappings))

        statuses = [s.status for s in classify_all(mappings, DOTFILES_ROOT, HOME_DIR, memory_fs)]
        assert statuses == [LinkStatus.LINKED, LinkStatus.LINKED, LinkStatus.MISSING]

    def test_missing_source_is_skipped_not_failed(self, memory_fs):
        report = LinkExecutor(memory_fs).execute(plan_for(memory_fs, Operation.LINK, [BASHRC]))

        assert report.results[0].outcome == ActionOutcome.SKIPPED_SOURCE_MISSING
        assert report.succeeded
        assert memory_fs.probe(HOME_DIR / '.bashrc').kind == TargetKind.ABSENT

    def test_linked_mapping_unchanged(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        memory_fs.add_symlink(HOME_DIR / '.bashrc', DOTFILES_ROOT / 'bashrc')

        report = LinkExecutor(memory_fs).execute(plan_for(memory_fs, Operation.LINK, [BASHRC]))

        assert report.results[0].outcome == ActionOutcome.UNCHANGED
        assert report.exit_code == 0


class TestForce:
    """Conflicting targets are only replaced with force."""

    def setup_conflict(self, fs):
        fs.add_file(DOTFILES_ROOT / 'bashrc', 'managed')
        fs.add_file(HOME_DIR / '.bashrc', 'user data')

    def test_refused_without_force(self, memory_fs):
        self.setup_conflict(memory_fs)
        actions = plan_for(memory_fs, Operation.LINK, [BASHRC])
        assert actions[0].requires_force

        report = LinkExecutor(memory_fs).execute(actions)

        assert report.results[0].outcome == ActionOutcome.REFUSED_CONFLICT
        assert report.exit_code == 1
        assert memory_fs.nodes[HOME_DIR / '.bashrc'].content == 'user data'

    def test_replaced_with_force(self, memory_fs):
        self.setup_conflict(memory_fs)

        report = LinkExecutor(memory_fs, force=True).execute(plan_for(memory_fs, Operation.LINK, [BASHRC]))

        assert report.results[0].outcome == ActionOutcome.REPLACED
        assert classify(BASHRC, DOTFILES_ROOT, HOME_DIR, memory_fs) == LinkStatus.LINKED

    def test_replaces_symlink_pointing_elsewhere(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        memory_fs.add_symlink(HOME_DIR / '.bashrc', Path('/etc/bashrc'))

        report = LinkExecutor(memory_fs, force=True).execute(plan_for(memory_fs, Operation.LINK, [BASHRC]))

        assert report.results[0].outcome == ActionOutcome.REPLACED
        assert memory_fs.probe(HOME_DIR / '.bashrc').link_target == DOTFILES_ROOT / 'bashrc'

    def test_force_never_writes_through_symlinked_directory(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'nvim.conf')
        memory_fs.add_file(Path('/shared/config/nvim/init'), 'user data')
        memory_fs.add_symlink(HOME_DIR / '.config', Path('/shared/config'))
        before = memory_fs.snapshot()

        report = LinkExecutor(memory_fs, force=True).execute(plan_for(memory_fs, Operation.LINK, [NVIM]))

        assert report.results[0].outcome == ActionOutcome.REFUSED_UNSAFE
        assert 'symlinked directory' in report.results[0].error
        assert report.exit_code == 1
        assert memory_fs.snapshot() == before

    def test_force_never_replaces_the_source(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc', 'managed')
        mapping = Mapping(source=Path('bashrc'), target=Path('bashrc'))
        action = PlannedAction(
            mapping=mapping,
            kind=ActionKind.CREATE_LINK,
            source_path=DOTFILES_ROOT / 'bashrc',
            target_path=DOTFILES_ROOT / 'bashrc',
            requires_force=True,
        )

        report = LinkExecutor(memory_fs, force=True).execute([action])

        assert report.results[0].outcome == ActionOutcome.REFUSED_UNSAFE
        assert memory_fs.nodes[DOTFILES_ROOT / 'bashrc'].content == 'managed'

    def test_refusal_does_not_stop_batch(self, memory_fs):
        self.setup_conflict(memory_fs)
        memory_fs.add_file(DOTFILES_ROOT / 'nvim.conf')

        report = LinkExecutor(memory_fs).execute(plan_for(memory_fs, Operation.LINK, [BASHRC, NVIM]))

        assert [r.outcome for r in report.results] == [ActionOutcome.REFUSED_CONFLICT, ActionOutcome.CREATED]
        assert not report.succeeded


class TestRaces:
    """Preconditions are re-verified right before mutating."""

    def test_target_appearing_before_create(self):
        fs = RacingFilesystem()
        fs.add_dir(HOME_DIR)
        fs.add_file(DOTFILES_ROOT / 'bashrc')
        actions = plan_for(fs, Operation.LINK, [BASHRC])

        report = LinkExecutor(fs).execute(actions)

        assert report.results[0].outcome == ActionOutcome.RACE_CONFLICT
        assert fs.nodes[HOME_DIR / '.bashrc'].content == 'written concurrently'
        assert report.exit_code == 1

    def test_target_appearing_after_planning(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        actions = plan_for(memory_fs, Operation.LINK, [BASHRC])
        memory_fs.add_file(HOME_DIR / '.bashrc', 'new user file')

        report = LinkExecutor(memory_fs).execute(actions)

        assert report.results[0].outcome == ActionOutcome.RACE_CONFLICT
        assert memory_fs.nodes[HOME_DIR / '.bashrc'].content == 'new user file'

    def test_unlink_refuses_substituted_target(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        memory_fs.add_symlink(HOME_DIR / '.bashrc', DOTFILES_ROOT / 'bashrc')
        actions = plan_for(memory_fs, Operation.UNLINK, [BASHRC])
        assert actions[0].kind == ActionKind.REMOVE_LINK

        # User replaces the link with a real file in the meantime
        memory_fs.remove_symlink(HOME_DIR / '.bashrc')
        memory_fs.add_file(HOME_DIR / '.bashrc', 'user data')

        report = LinkExecutor(memory_fs).execute(actions)

        assert report.results[0].outcome == ActionOutcome.RACE_CONFLICT
        assert memory_fs.nodes[HOME_DIR / '.bashrc'].content == 'user data'

    def test_symlinked_directory_appearing_after_planning(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'nvim.conf')
        actions = plan_for(memory_fs, Operation.LINK, [NVIM])
        memory_fs.add_dir(Path('/shared/config'))
        memory_fs.add_symlink(HOME_DIR / '.config', Path('/shared/config'))

        report = LinkExecutor(memory_fs, force=True).execute(actions)

        assert report.results[0].outcome == ActionOutcome.REFUSED_UNSAFE
        assert Path('/shared/config/nvim') not in memory_fs.nodes

    def test_unreadable_target_does_not_stop_batch(self):
        fs = UnreadableFilesystem(HOME_DIR / '.bashrc')
        fs.add_dir(HOME_DIR)
        fs.add_file(DOTFILES_ROOT / 'bashrc')
        fs.add_file(DOTFILES_ROOT / 'nvim.conf')
        actions = plan_for(fs, Operation.LINK, [BASHRC, NVIM])

        refused = LinkExecutor(fs).execute(actions)
        forced = LinkExecutor(fs, force=True).execute(actions)

        assert [r.outcome for r in refused.results] == [ActionOutcome.REFUSED_CONFLICT, ActionOutcome.CREATED]
        assert 'Permission denied' in refused.results[0].error
        assert forced.results[0].outcome == ActionOutcome.PERMISSION_DENIED

    def test_permission_error_reported_per_mapping(self):
        fs = ReadOnlyFilesystem()
        fs.add_dir(HOME_DIR)
        fs.add_file(DOTFILES_ROOT / 'bashrc')
        fs.add_file(DOTFILES_ROOT / 'nvim.conf')

        report = LinkExecutor(fs).execute(plan_for(fs, Operation.LINK, [BASHRC, NVIM]))

        assert [r.outcome for r in report.results] == [ActionOutcome.PERMISSION_DENIED] * 2
        assert 'Permission denied' in report.results[0].error


class TestUnlink:

    def test_removes_only_matching_links(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        memory_fs.add_file(DOTFILES_ROOT / 'nvim.conf')
        memory_fs.add_symlink(HOME_DIR / '.bashrc', DOTFILES_ROOT / 'bashrc')
        memory_fs.add_file(HOME_DIR / '.config/nvim/init', 'user data')

        report = LinkExecutor(memory_fs).execute(plan_for(memory_fs, Operation.UNLINK, [BASHRC, NVIM]))

        assert [r.outcome for r in report.results] == [ActionOutcome.REMOVED, ActionOutcome.UNCHANGED]
        assert memory_fs.probe(HOME_DIR / '.bashrc').kind == TargetKind.ABSENT
        assert memory_fs.nodes[HOME_DIR / '.config/nvim/init'].content == 'user data'
        assert DOTFILES_ROOT / 'bashrc' in memory_fs.nodes


class TestDryRun:
    """Dry runs report what would happen without mutating anything."""

    def test_link_does_not_mutate(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'nvim.conf')
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        memory_fs.add_file(HOME_DIR / '.bashrc', 'user data')
        before = memory_fs.snapshot()

        executor = DryRunExecutor(memory_fs, force=True)
        report = executor.execute(plan_for(memory_fs, Operation.LINK, [NVIM, BASHRC]))

        assert memory_fs.snapshot() == before
        assert report.dry_run
        assert [r.outcome for r in report.results] == [ActionOutcome.CREATED_DRYRUN, ActionOutcome.REPLACED_DRYRUN]
        assert f"mkdir -p {HOME_DIR / '.config/nvim'}" in executor.recorded
        assert f"ln -s {DOTFILES_ROOT / 'nvim.conf'} {HOME_DIR / '.config/nvim/init'}" in executor.recorded

    def test_unlink_does_not_mutate(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        memory_fs.add_symlink(HOME_DIR / '.bashrc', DOTFILES_ROOT / 'bashrc')
        before = memory_fs.snapshot()

        report = DryRunExecutor(memory_fs).execute(plan_for(memory_fs, Operation.UNLINK, [BASHRC]))

        assert memory_fs.snapshot() == before
        assert report.results[0].outcome == ActionOutcome.REMOVED_DRYRUN

    def test_dry_run_still_refuses_conflicts(self, memory_fs):
        memory_fs.add_file(DOTFILES_ROOT / 'bashrc')
        memory_fs.add_file(HOME_DIR / '.bashrc')

        report = DryRunExecutor(memory_fs).execute(plan_for(memory_fs, Operation.LINK, [BASHRC]))

        assert report.results[0].outcome == ActionOutcome.REFUSED_CONFLICT

    def test_make_executor_selects_implementation(self, memory_fs):
        assert isinstance(make_executor(memory_fs, dry_run=True), DryRunExecutor)
        assert type(make_executor(memory_fs, dry_run=False)) is LinkExecutor
        assert make_executor(memory_fs, force=True).force

    def test_dry_run_adopt_then_link(self, memory_fs):
        memory_fs.add_file(HOME_DIR / '.bashrc', 'user data')
        before = memory_fs.snapshot()
        executor = DryRunExecutor(memory_fs)

        executor.adopt(HOME_DIR / '.bashrc', DOTFILES_ROOT / 'bashrc')
        result = executor.create_link(plan_for(memory_fs, Operation.LINK, [BASHRC])[0])

        assert result.outcome == ActionOutcome.CREATED_DRYRUN
        assert memory_fs.snapshot() == before
        assert executor.recorded[0] == f"mv {HOME_DIR / '.bashrc'} {DOTFILES_ROOT / 'bashrc'}"
