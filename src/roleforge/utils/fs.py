"""
Filesystem helpers for build context assembly.

All build output goes through an fsspec local filesystem. The helpers create
parent directories, keep or apply file modes and skip excluded names while
copying trees.
"""

import logging
import stat
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

import fsspec

logger = logging.getLogger(__name__)

fs = fsspec.filesystem("file")


def make_dirs(path: Path) -> Path:
    fs.mkdirs(str(path), exist_ok=True)
    return path


def copy_file(source: Path, dest: Path, mode: Optional[int] = None) -> Path:
    """
    Copy a single file, creating the destination's parent directories.

    Symlinks are copied as the content they point to.

    Args:
        source: Path to source file.
        dest: Destination file path.
        mode: File mode applied after copying; defaults to the source's mode.

    Returns:
        The destination path.
    """
    fs.mkdirs(str(dest.parent), exist_ok=True)
    # cp_file takes the path literally; copy() would expand glob characters
    fs.cp_file(str(source), str(dest))
    if mode is None:
        mode = stat.S_IMODE(Path(source).stat().st_mode)
    dest.chmod(mode)
    return dest


def copy_tree(source_dir: Path, dest_dir: Path, exclude: Iterable[str] = ()) -> int:
    """
    Copy a directory tree, skipping every file or directory whose name is in ``exclude``.

    Returns:
        Number of files copied.

    Raises:
        FileNotFoundError: If source_dir is not a directory.
    """
    if not fs.isdir(str(source_dir)):
        raise FileNotFoundError(f"Source directory not found: {source_dir}")

    excluded = set(exclude)
    root = PurePosixPath(fs.info(str(source_dir))["name"])
    entries = fs.find(str(source_dir), withdirs=True, detail=True)

    copied = 0
    fs.mkdirs(str(dest_dir), exist_ok=True)
    for name in sorted(entries):
        rel_path = PurePosixPath(name).relative_to(root)
        if not rel_path.parts:
            continue
        if excluded.intersection(rel_path.parts):
            logger.debug(f"Skipping excluded path '{name}'")
            continue
        dest_path = dest_dir.joinpath(*rel_path.parts)
        if entries[name]["type"] == "directory":
            fs.mkdirs(str(dest_path), exist_ok=True)
        else:
            copy_file(Path(name), dest_path)
            copied += 1
    return copied


def write_text(dest: Path, content: str, mode: Optional[int] = None) -> Path:
    fs.mkdirs(str(dest.parent), exist_ok=True)
    with fs.open(str(dest), "w", encoding="utf-8") as f:
        f.write(content)
    if mode is not None:
        dest.chmod(mode)
    return dest


def reset_dir(path: Path) -> Path:
    """Remove ``path`` if it exists and create it again, empty."""
    if fs.exists(str(path)):
        logger.debug(f"Directory '{path}' exists. Cleaning it up.")
        fs.rm(str(path), recursive=True)
    fs.mkdirs(str(path))
    return path
