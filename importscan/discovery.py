"""File discovery utilities for scanning source trees."""

import fnmatch
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from .errors import NotFoundError


DEFAULT_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")
DEFAULT_IGNORE = ("node_modules", "dist")


def _is_ignored(relative: Path, patterns: Iterable[str]) -> bool:
    """
    Check a root-relative path against ignore globs.

    Every leading portion of the path is tested, so ``node_modules`` also
    excludes ``node_modules/react/index.js``.
    """
    parts = relative.parts
    for i in range(len(parts)):
        partial = "/".join(parts[: i + 1])
        for pattern in patterns:
            if fnmatch.fnmatchcase(partial, pattern):
                return True
    return False


def _file_id(path: Path) -> Optional[Tuple[int, int]]:
    try:
        st = path.stat()
    except OSError:
        return None
    return st.st_dev, st.st_ino


def iter_files(
    root: Path,
    include_ext: Optional[Iterable[str]] = None,
    ignore: Optional[Iterable[str]] = None,
    follow_symlinks: bool = False,
    max_depth: Optional[int] = None,
) -> Iterator[Path]:
    """
    Iterate over source files in a directory tree.

    Args:
        root: Root directory to scan.
        include_ext: File extensions to include (e.g., ``{'.ts', '.tsx'}``).
                    If None, uses DEFAULT_EXTENSIONS.
        ignore: Glob patterns matched against root-relative paths.
               If None, uses DEFAULT_IGNORE.
        follow_symlinks: Whether to descend into symlinked directories.
        max_depth: Maximum depth to descend; files directly under ``root``
                  are at depth 1. None means unlimited.

    Yields:
        Path objects for matching files, each file at most once.

    Raises:
        NotFoundError: If ``root`` does not exist or is not a directory.
    """
    extensions: Set[str] = set(include_ext if include_ext is not None else DEFAULT_EXTENSIONS)
    patterns = tuple(ignore if ignore is not None else DEFAULT_IGNORE)

    root = Path(root)
    if not root.is_dir():
        raise NotFoundError(f"Path not found: {root}")

    seen_files: Set[Tuple[int, int]] = set()
    seen_dirs: Set[Tuple[int, int]] = set()

    def _walk(current: Path, depth: int) -> Iterator[Path]:
        dir_id = _file_id(current)
        if dir_id is not None:
            if dir_id in seen_dirs:
                return
            seen_dirs.add(dir_id)

        if max_depth is not None and depth + 1 > max_depth:
            return

        try:
            entries = sorted(current.iterdir())
        except (PermissionError, FileNotFoundError):
            return

        for entry in entries:
            if _is_ignored(entry.relative_to(root), patterns):
                continue
            if entry.is_dir():
                if entry.is_symlink() and not follow_symlinks:
                    continue
                yield from _walk(entry, depth + 1)
            elif entry.is_file():
                if entry.suffix not in extensions:
                    continue
                file_id = _file_id(entry)
                if file_id is not None:
                    if file_id in seen_files:
                        continue
                    seen_files.add(file_id)
                yield entry

    yield from _walk(root, 0)


def scan(
    root: Path,
    include_ext: Optional[Iterable[str]] = None,
    ignore: Optional[Iterable[str]] = None,
    follow_symlinks: bool = False,
    max_depth: Optional[int] = None,
) -> List[str]:
    """Return the files :func:`iter_files` finds, as path strings."""
    return [
        str(path)
        for path in iter_files(
            root,
            include_ext=include_ext,
            ignore=ignore,
            follow_symlinks=follow_symlinks,
            max_depth=max_depth,
        )
    ]
