"""Shared fixtures for the dotfiles test suite."""

import pytest

from memory_fs import DOTFILES_ROOT, HOME_DIR, MemoryFilesystem


@pytest.fixture
def memory_fs():
    """In-memory filesystem with empty dotfiles and home directories."""
    fs = MemoryFilesystem()
    fs.add_dir(DOTFILES_ROOT)
    fs.add_dir(HOME_DIR)
    return fs


@pytest.fixture
def disk_roots(tmp_path, monkeypatch):
    """Real dotfiles and home directories under tmp_path."""
    monkeypatch.delenv('XDG_CONFIG_HOME', raising=False)
    monkeypatch.delenv('DOTFILES_ROOT', raising=False)

    dotfiles_root = tmp_path / 'dotfiles'
    home_dir = tmp_path / 'home'
    dotfiles_root.mkdir()
    home_dir.mkdir()
    return dotfiles_root, home_dir
