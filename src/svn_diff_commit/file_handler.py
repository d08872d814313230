"""File handler module: tree mirroring and working copy housekeeping.

Provides the filesystem side of a diff-commit run:

- ``mirror_tree`` copies a source tree over a destination, one way.
- ``clean_working_copy_root`` empties a working copy except for ``.svn``.
- ``top_level_entries`` lists a working copy's direct children.
- ``remove_tree`` deletes files or trees, including read-only entries.

Functions raise ``OSError`` unchanged; the pipeline attributes failures
to the step that caused them.
"""

import logging
import os
import shutil
import stat
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

SVN_ADMIN_DIR = ".svn"


# =============================================================================
# Mirroring
# =============================================================================


def mirror_tree(source_dir: Path, dest_dir: Path) -> int:
    """Recursively copy *source_dir*'s contents into *dest_dir*.

    Destination directories are created as needed and existing files are
    overwritten byte for byte.  Entries that exist only in *dest_dir* are
    left alone.  Symlinks are followed and permissions are not copied.

    Args:
        source_dir: Directory to copy from.
        dest_dir: Directory to copy into (created if missing).

    Returns:
        Number of files copied.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    copied = 0
    with os.scandir(source_dir) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        target = dest_dir / entry.name
        if entry.is_dir():
            copied += mirror_tree(Path(entry.path), target)
            continue
        shutil.copyfile(entry.path, target)
        copied += 1
    return copied


# =============================================================================
# Working copy housekeeping
# =============================================================================


def top_level_entries(directory: Path) -> list[Path]:
    """Return the sorted direct children of *directory*, minus ``.svn``."""
    return sorted(
        p for p in directory.iterdir() if p.name != SVN_ADMIN_DIR
    )


def clean_working_copy_root(working_copy: Path) -> list[str]:
    """Remove every entry directly under *working_copy* except ``.svn``.

    Returns:
        Names of the removed entries.
    """
    removed = []
    for path in top_level_entries(working_copy):
        remove_tree(path)
        removed.append(path.name)
    logger.debug(
        "Cleaned %d entries from %s", len(removed), working_copy
    )
    return removed


def _make_writable_and_retry(func, path, exc_info) -> None:
    """rmtree error handler: clear read-only bits, then retry once."""
    exc = exc_info[1] if isinstance(exc_info, tuple) else exc_info
    if not isinstance(exc, PermissionError):
        raise exc
    parent = os.path.dirname(path)
    if parent:
        os.chmod(parent, stat.S_IRWXU)
    if not os.path.islink(path):
        os.chmod(path, stat.S_IWRITE | stat.S_IREAD)
    func(path)


def remove_tree(path: Path) -> None:
    """Remove a file or a whole directory tree.

    svn marks its pristine copies read-only, which plain ``rmtree`` cannot
    delete on Windows; such entries are made writable and removed again.

    Raises:
        FileNotFoundError: *path* does not exist.
    """
    if path.is_symlink() or not path.is_dir():
        try:
            path.unlink()
        except PermissionError as exc:
            _make_writable_and_retry(os.unlink, str(path), exc)
        return

    if sys.version_info >= (3, 12):
        shutil.rmtree(path, onexc=_make_writable_and_retry)
    else:
        shutil.rmtree(path, onerror=_make_writable_and_retry)
