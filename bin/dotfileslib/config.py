"""Configuration management."""

# ============================================================
# Imports
# ============================================================

import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Any

# Require Python 3.11+ for tomllib
if sys.version_info < (3, 11):
    print("Error: Python 3.11 or higher is required", file=sys.stderr)
    sys.exit(1)

import tomllib

import tomli_w

from .errors import ConfigError, RootInaccessible
from .filesystem import Filesystem, LocalFilesystem, lexical_absolute
from .models import Mapping
from .store import MappingStore, normalize_relative_path

logger = logging.getLogger(__name__)

CONFIG_VERSION = 1


# ============================================================
# Configuration
# ============================================================

class Config:
    """Configuration paths and runtime state for one invocation."""

    def __init__(
        self,
        dotfiles_root: Path,
        home_dir: Path | None = None,
        config_file: Path | None = None,
        filesystem: Filesystem | None = None,
    ):
        # Validate dotfiles root
        if not dotfiles_root.is_dir():
            raise RootInaccessible(dotfiles_root)

        # Resolve paths lexically so links point exactly at root/source
        self.dotfiles_root = lexical_absolute(dotfiles_root)
        self.home_dir = lexical_absolute(home_dir or Path.home())
        self.config_file = config_file or resolve_config_file(self.dotfiles_root, self.home_dir)
        self.filesystem = filesystem or LocalFilesystem()

        # Runtime flags
        self.dry_run = False
        self.force = False
        self.verbose = False
        self.json = False
        self.move = False

        # Command arguments
        self.source: str | None = None
        self.target: str | None = None


def resolve_config_file(dotfiles_root: Path, home_dir: Path) -> Path:
    """
    Locate the mapping file inside the dotfiles root.

    The file mirrors the user config directory, so with the default
    `~/.config` it lives at `<root>/.config/dotfiles/config.toml`.
    """
    config_dir = Path('.config')

    xdg_config_home = os.environ.get('XDG_CONFIG_HOME')
    if xdg_config_home:
        xdg_path = lexical_absolute(Path(xdg_config_home))
        if xdg_path != home_dir and xdg_path.is_relative_to(home_dir):
            config_dir = xdg_path.relative_to(home_dir)

    return dotfiles_root / config_dir / 'dotfiles' / 'config.toml'


# ============================================================
# TOML Loading
# ============================================================

def load_toml(path: Path) -> dict[str, Any]:
    """Load and parse a TOML file."""
    with open(path, 'rb') as f:
        return tomllib.load(f)


def load_mappings(config: Config) -> MappingStore:
    """
    Load and validate the declared mappings.

    Returns an empty store when the mapping file does not exist yet.

    Raises:
        ConfigError: If the file cannot be read or has an invalid layout
        DuplicateTarget: If two entries share a target
        NestedMapping: If one target lies inside another
        InvalidMapping: If an entry is absolute or escapes its root
    """
    if not config.config_file.exists():
        logger.debug("No mapping file at %s", config.config_file)
        return MappingStore()

    try:
        data = load_toml(config.config_file)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"failed to parse {config.config_file}: {e}") from e
    except OSError as e:
        raise ConfigError(f"could not read {config.config_file}: {e}") from e

    # Check file layout
    version = data.get('config_version', CONFIG_VERSION)
    if version != CONFIG_VERSION:
        raise ConfigError(f"unsupported config_version {version!r} in {config.config_file}")

    entries = data.get('mappings', [])
    if not isinstance(entries, list):
        raise ConfigError(f"'mappings' must be an array in {config.config_file}")

    store = MappingStore([parse_mapping(entry) for entry in entries])
    logger.debug("Loaded %d mappings from %s", len(store), config.config_file)
    return store


def parse_mapping(entry: Any) -> Mapping:
    """
    Create a Mapping from a TOML value.

    A string declares the same relative path on both sides; a table needs a
    `target` and may name a different `source`.
    """
    if isinstance(entry, str):
        path = normalize_relative_path(entry)
        return Mapping(source=path, target=path)

    if isinstance(entry, dict) and isinstance(entry.get('target'), str):
        target = normalize_relative_path(entry['target'])
        source_value = entry.get('source', entry['target'])
        if not isinstance(source_value, str):
            raise ConfigError(f"mapping source must be a string: {entry!r}")
        return Mapping(source=normalize_relative_path(source_value), target=target)

    raise ConfigError(f"invalid mapping entry: {entry!r}")


# ============================================================
# TOML Saving
# ============================================================

def save_mappings(config: Config, store: MappingStore) -> None:
    """Write the mappings back to the mapping file, replacing it atomically."""
    data = {
        'config_version': CONFIG_VERSION,
        'mappings': [
            {'source': mapping.source.as_posix(), 'target': mapping.target.as_posix()}
            for mapping in store
        ],
    }

    try:
        config.config_file.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temp file in the same directory, then rename over the existing file
        fd, temp_name = tempfile.mkstemp(dir=config.config_file.parent, prefix='.config.', suffix='.tmp')
        try:
            with os.fdopen(fd, 'wb') as f:
                tomli_w.dump(data, f)
            os.replace(temp_name, config.config_file)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise ConfigError(f"could not write {config.config_file}: {e}") from e

    logger.debug("Saved %d mappings to %s", len(store), config.config_file)
