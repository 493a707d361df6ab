"""Matching of resolved imports against a target file or directory."""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, TypeVar, Union

from report.model import (
    DirectoryImporterResult,
    ImportGroup,
    Importer,
    ImporterResult,
    ResolvedImport,
)
from .aliases import AliasConfig, load_alias_config
from .errors import InvalidTargetError, NotFoundError, ReadError, TargetNotFoundError
from .extractor import parse_imports
from .reporter import Reporter, default_reporter
from .resolver import is_within, normalize_path, probe_extensions, resolve_import_path


logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 1

T = TypeVar("T")


def normalize_file_target(target: str) -> str:
    """
    Normalize a file target to an absolute path.

    If the path does not exist as written, the known source extensions are
    tried in order.

    Args:
        target: Target file path, possibly without extension.

    Returns:
        Normalized absolute path of an existing file.

    Raises:
        TargetNotFoundError: If no file exists for any extension.
        InvalidTargetError: If the target is a directory.
    """
    normalized = normalize_path(target)
    if os.path.isdir(normalized):
        raise InvalidTargetError(f"Target is a directory, not a file: {target}")
    if os.path.exists(normalized):
        return normalized

    probed = probe_extensions(normalized)
    if probed is None:
        raise TargetNotFoundError(f"Target file not found: {target}")
    logger.debug("Target %s resolved to %s", target, probed)
    return probed


def normalize_directory_target(target: str) -> str:
    """
    Normalize a directory target to an absolute path.

    Raises:
        TargetNotFoundError: If the directory does not exist.
        InvalidTargetError: If the target exists but is not a directory.
    """
    normalized = normalize_path(target)
    if not os.path.exists(normalized):
        raise TargetNotFoundError(f"Target directory not found: {target}")
    if not os.path.isdir(normalized):
        raise InvalidTargetError(f"Target is not a directory: {target}")
    return normalized


def _locate(file_path: str, root: str) -> str:
    """
    Return the normalized location of a candidate file.

    Candidates may be absolute or relative to the scan root. A relative
    candidate missing under the root is taken relative to the working
    directory, which is what :func:`scan` returns for a relative root.
    """
    if os.path.isabs(file_path):
        return normalize_path(file_path)
    under_root = os.path.join(root, file_path)
    if os.path.exists(under_root) or not os.path.exists(file_path):
        return normalize_path(under_root)
    return normalize_path(file_path)


def _run_per_file(
    files: Sequence[str],
    worker: Callable[[str], T],
    concurrency: int,
) -> List[T]:
    """Apply ``worker`` to every file and return the results in input order."""
    if concurrency <= 1 or len(files) <= 1:
        return [worker(f) for f in files]

    results: Dict[int, T] = {}
    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        futures = {executor.submit(worker, f): index for index, f in enumerate(files)}
        for future, index in futures.items():
            results[index] = future.result()
    return [results[index] for index in range(len(files))]


def _collect_matches(
    file_path: str,
    location: str,
    config: AliasConfig,
    reporter: Reporter,
    accept: Callable[[str], bool],
) -> List[ResolvedImport]:
    """
    Extract and resolve the imports of one file, keeping those ``accept`` likes.

    Read failures are reported and yield no matches.
    """
    try:
        imports = parse_imports(location)
    except (NotFoundError, ReadError) as e:
        reporter.warning(f"Skipping file - {e}", file_path)
        return []

    matches: List[ResolvedImport] = []
    for imp in imports:
        if imp.is_dynamic:
            continue
        resolved = resolve_import_path(
            location,
            imp.specifier,
            import_map=config.import_map,
            path_map=config.path_map,
            reporter=reporter,
        )
        if resolved is None:
            continue
        resolved = normalize_path(resolved)
        if accept(resolved):
            matches.append(ResolvedImport(file_path, imp.specifier, resolved, imp.line))
    return matches


def _scan_for_target(
    files: Sequence[str],
    root: str,
    config: AliasConfig,
    reporter: Reporter,
    concurrency: int,
    is_self: Callable[[str], bool],
    accept: Callable[[str], bool],
) -> List[ResolvedImport]:
    def worker(file_path: str) -> List[ResolvedImport]:
        location = _locate(file_path, root)
        if is_self(location):
            return []
        return _collect_matches(file_path, location, config, reporter, accept)

    per_file = _run_per_file(files, worker, concurrency)
    return [match for matches in per_file for match in matches]


def _alias_config(
    root: str,
    alias_config: Optional[AliasConfig],
    reporter: Reporter,
) -> AliasConfig:
    if alias_config is not None:
        return alias_config
    return load_alias_config(root, reporter=reporter)


def find_importers(
    target: str,
    files: Sequence[str],
    root: str,
    alias_config: Optional[AliasConfig] = None,
    reporter: Optional[Reporter] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> List[ResolvedImport]:
    """
    Find every import in ``files`` that resolves to the target file.

    Args:
        target: Target file; extension may be omitted.
        files: Candidate source files, absolute or relative to ``root``.
        root: Scan root; ``import_map.json`` and ``tsconfig.json`` are read
            from here unless ``alias_config`` is given.
        alias_config: Preloaded alias configuration.
        reporter: Receives per-file warnings; defaults to logging.
        concurrency: Maximum number of files processed at once.

    Returns:
        Matching imports, in the order of ``files``.

    Raises:
        TargetNotFoundError: If the target file does not exist.
        InvalidTargetError: If the target is a directory.
    """
    reporter = default_reporter(reporter)
    normalized_target = normalize_file_target(target)
    config = _alias_config(root, alias_config, reporter)

    matches = _scan_for_target(
        files,
        root,
        config,
        reporter,
        concurrency,
        is_self=lambda location: location == normalized_target,
        accept=lambda resolved: resolved == normalized_target,
    )
    logger.debug("%d import(s) of %s in %d file(s)", len(matches), normalized_target, len(files))
    return matches


def find_directory_importers(
    target: str,
    files: Sequence[str],
    root: str,
    alias_config: Optional[AliasConfig] = None,
    reporter: Optional[Reporter] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> DirectoryImporterResult:
    """
    Find every import in ``files`` of a file inside the target directory.

    Files inside the target directory are not scanned. Matches are grouped
    by the imported file's path relative to the target directory.

    Args:
        target: Target directory.
        files: Candidate source files, absolute or relative to ``root``.
        root: Scan root.
        alias_config: Preloaded alias configuration.
        reporter: Receives per-file warnings; defaults to logging.
        concurrency: Maximum number of files processed at once.

    Returns:
        DirectoryImporterResult with sorted groups.

    Raises:
        TargetNotFoundError: If the directory does not exist.
        InvalidTargetError: If the target is not a directory.
    """
    reporter = default_reporter(reporter)
    normalized_target = normalize_directory_target(target)
    config = _alias_config(root, alias_config, reporter)

    def inside(path: str) -> bool:
        return is_within(path, normalized_target)

    def below(path: str) -> bool:
        return path != normalized_target and inside(path)

    matches = _scan_for_target(
        files, root, config, reporter, concurrency, is_self=inside, accept=below
    )

    grouped: Dict[str, List[Importer]] = {}
    for match in matches:
        relative = os.path.relpath(match.resolved_path, normalized_target).replace(os.sep, "/")
        grouped.setdefault(relative, []).append(
            Importer(match.source_file, match.import_path, match.line)
        )

    groups = [
        ImportGroup(imported_file, sorted(importers, key=lambda imp: imp.source_file))
        for imported_file, importers in sorted(grouped.items())
    ]
    return DirectoryImporterResult(target=target, root=root, groups=groups)


def find_target_importers(
    target: str,
    files: Sequence[str],
    root: str,
    alias_config: Optional[AliasConfig] = None,
    reporter: Optional[Reporter] = None,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> Union[ImporterResult, DirectoryImporterResult]:
    """
    Search for importers of a file or directory, whichever ``target`` is.

    Returns:
        ImporterResult for a file target, DirectoryImporterResult for a
        directory target.
    """
    kwargs = dict(alias_config=alias_config, reporter=reporter, concurrency=concurrency)
    if os.path.isdir(target):
        return find_directory_importers(target, files, root, **kwargs)
    matches = find_importers(target, files, root, **kwargs)
    return ImporterResult.from_matches(target, root, matches)
