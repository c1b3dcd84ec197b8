"""Dotfiles link management library."""

from .command_add import execute_add
from .command_link import execute_link
from .command_remove import execute_remove
from .command_status import execute_status
from .command_unlink import execute_unlink
from .config import Config, load_mappings, save_mappings
from .errors import (
    BothPathsExist,
    ConfigError,
    DotfilesError,
    DuplicateTarget,
    InvalidMapping,
    NestedMapping,
    NotFound,
    OutsideValidDir,
    RootInaccessible,
)
from .executor import DryRunExecutor, LinkExecutor, make_executor
from .filesystem import Filesystem, LocalFilesystem
from .models import (
    ActionKind,
    ActionOutcome,
    ActionResult,
    ExecutionReport,
    LinkStatus,
    Mapping,
    MappingStatus,
    Operation,
    PlannedAction,
    TargetKind,
    TargetState,
)
from .planner import plan
from .reconcile import classify, classify_all, inspect_mapping
from .store import MappingStore

__all__ = [
    # Configuration
    'Config',
    'load_mappings',
    'save_mappings',
    # Errors
    'BothPathsExist',
    'ConfigError',
    'DotfilesError',
    'DuplicateTarget',
    'InvalidMapping',
    'NestedMapping',
    'NotFound',
    'OutsideValidDir',
    'RootInaccessible',
    # Domain models
    'ActionKind',
    'ActionOutcome',
    'ActionResult',
    'ExecutionReport',
    'LinkStatus',
    'Mapping',
    'MappingStatus',
    'Operation',
    'PlannedAction',
    'TargetKind',
    'TargetState',
    # Core
    'DryRunExecutor',
    'Filesystem',
    'LinkExecutor',
    'LocalFilesystem',
    'MappingStore',
    'classify',
    'classify_all',
    'inspect_mapping',
    'make_executor',
    'plan',
    # Commands
    'execute_add',
    'execute_link',
    'execute_remove',
    'execute_status',
    'execute_unlink',
]
