"""Directory listing and best-effort removal used by the rotation core."""

from __future__ import annotations

import os
from typing import Callable

from logroll.errors import DeleteError, DirectoryAccessError, PathResolutionError

# Returns False to set the given name or path aside.
PathFilter = Callable[[str], bool]


def list_dir_files(
    dir_path: str,
    path_filter: PathFilter | None = None,
    names_only: bool = True,
) -> list[str]:
    """Return the regular files located in dir_path.

    Symlinks and sub-directories are skipped. With names_only=False the
    result holds absolute paths instead of bare names. path_filter sees the
    same value that would be returned. Order is whatever the OS yields.
    """
    abs_dir = ""
    if not names_only:
        try:
            abs_dir = os.path.abspath(dir_path)
        except OSError as exc:
            raise PathResolutionError(
                f"cannot get absolute path of directory {dir_path}: {exc}", dir_path
            ) from exc

    files: list[str] = []
    try:
        # scandir pulls entries from the OS in fixed-size batches, so huge
        # directories are never materialized in one read.
        with os.scandir(dir_path) as entries:
            for entry in entries:
                if not entry.is_file(follow_symlinks=False):
                    continue
                path = entry.name if names_only else os.path.join(abs_dir, entry.name)
                if path_filter is not None and not path_filter(path):
                    continue
                files.append(path)
    except OSError as exc:
        raise DirectoryAccessError(f"cannot open directory {dir_path}: {exc}", dir_path) from exc
    return files


def try_remove_file(path: str) -> None:
    """Remove a file, ignoring only the case where it is already gone."""
    try:
        os.remove(path)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise DeleteError(f"cannot remove {path}: {exc}", path) from exc
