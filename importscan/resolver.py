"""Resolution of import specifiers to absolute file paths."""

import os
import re
from typing import Optional, Tuple

from .aliases import AliasMap, PathMapConfig
from .reporter import Reporter, default_reporter


# Probe order for extensionless specifiers and directory index files.
RESOLVE_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs")

_TRAILING_EXTENSION = re.compile(r"\.[^/.]+$")


def normalize_path(path: str) -> str:
    """Return ``path`` as a normalized absolute path without touching the disk."""
    return os.path.normpath(os.path.abspath(path))


def is_within(path: str, directory: str) -> bool:
    """Check whether normalized ``path`` is ``directory`` or lies below it."""
    if path == directory:
        return True
    prefix = directory if directory.endswith(os.sep) else directory + os.sep
    return path.startswith(prefix)


def probe_extensions(path: str) -> Optional[str]:
    """
    Find an existing file for ``path`` by trying the known extensions.

    The last extension of ``path`` (if any) is stripped first, so
    ``button.js`` also finds ``button.ts``.

    Args:
        path: Absolute, normalized path.

    Returns:
        The first existing ``<base><ext>``, or None.
    """
    base = _TRAILING_EXTENSION.sub("", path)
    for ext in RESOLVE_EXTENSIONS:
        candidate = base + ext
        if os.path.isfile(candidate):
            return candidate
    return None


def probe_index(directory: str) -> Optional[str]:
    """Return the first existing ``index.<ext>`` inside ``directory``, or None."""
    if not os.path.isdir(directory):
        return None
    for ext in RESOLVE_EXTENSIONS:
        candidate = os.path.join(directory, "index" + ext)
        if os.path.isfile(candidate):
            return candidate
    return None


def _probe(path: str) -> Optional[str]:
    """Literal file, then extension variants, then directory index."""
    if os.path.isfile(path):
        return path
    return probe_extensions(path) or probe_index(path)


def _resolve_mapped(importer_dir: str, *parts: str) -> str:
    """
    Resolve an aliased path against the importer's directory.

    Mapped paths go through the same probing as relative imports and fall
    back to the mapped path itself when nothing exists.
    """
    resolved = normalize_path(os.path.join(importer_dir, *parts))
    return _probe(resolved) or resolved


def _match_import_map(specifier: str, import_map: AliasMap, importer_dir: str) -> Optional[str]:
    imports = import_map.imports
    if imports.get(specifier):
        return _resolve_mapped(importer_dir, imports[specifier])

    # First key in declaration order that prefixes the specifier.
    for prefix, replacement in imports.items():
        if prefix and specifier.startswith(prefix):
            remainder = specifier[len(prefix):].lstrip("/")
            return _resolve_mapped(importer_dir, replacement, remainder)
    return None


def match_path_pattern(specifier: str, pattern: str) -> Optional[str]:
    """
    Match ``specifier`` against a path-mapping pattern.

    Args:
        specifier: Import specifier.
        pattern: Pattern with at most one ``*`` wildcard.

    Returns:
        The text captured by the wildcard (empty string for exact patterns),
        or None if the pattern does not match.
    """
    if "*" not in pattern:
        return "" if specifier == pattern else None
    if pattern.count("*") != 1:
        return None
    prefix, suffix = pattern.split("*", 1)
    if len(specifier) < len(prefix) + len(suffix):
        return None
    if not specifier.startswith(prefix) or not specifier.endswith(suffix):
        return None
    return specifier[len(prefix):len(specifier) - len(suffix)]


def _match_path_map(specifier: str, path_map: PathMapConfig, importer_dir: str) -> Optional[str]:
    for pattern, templates in path_map.patterns:
        if not templates:
            continue
        captured = match_path_pattern(specifier, pattern)
        if captured is None:
            continue
        replacement = templates[0].replace("*", captured)
        return _resolve_mapped(importer_dir, path_map.base_dir, replacement)
    return None


def _resolve_relative(specifier: str, importer_dir: str) -> str:
    resolved = normalize_path(os.path.join(importer_dir, specifier))
    # Returns the unprobed path when nothing exists; callers compare it
    # against real targets, so a missing file simply never matches.
    return _probe(resolved) or resolved


def _resolve_absolute(specifier: str) -> Optional[str]:
    return _probe(os.path.normpath(specifier))


def resolve_import_path(
    importer: str,
    specifier: str,
    import_map: Optional[AliasMap] = None,
    path_map: Optional[PathMapConfig] = None,
    reporter: Optional[Reporter] = None,
) -> Optional[str]:
    """
    Resolve an import specifier to an absolute path.

    Strategies are tried in order and the first applicable one wins:

    1. Import map exact match.
    2. Import map prefix match, keys in declaration order.
    3. Path-mapping pattern match, patterns in declaration order.
    4. Relative specifier (``./`` or ``../``).
    5. Absolute specifier (``/``).
    6. Bare specifier: never resolved.

    Relative specifiers that find no file still resolve to the normalized
    path as written. Absolute specifiers that find no file are unresolved.

    Args:
        importer: Path of the file containing the import.
        specifier: The import specifier as written.
        import_map: Optional import map aliases.
        path_map: Optional tsconfig-style path mapping.
        reporter: Receives a warning if resolution fails unexpectedly.

    Returns:
        Absolute path string, or None if the specifier cannot be resolved.
    """
    try:
        importer_dir = os.path.dirname(normalize_path(importer))

        if import_map is not None:
            resolved = _match_import_map(specifier, import_map, importer_dir)
            if resolved is not None:
                return resolved

        if path_map is not None:
            resolved = _match_path_map(specifier, path_map, importer_dir)
            if resolved is not None:
                return resolved

        if specifier.startswith(("./", "../")):
            return _resolve_relative(specifier, importer_dir)

        if specifier.startswith("/"):
            return _resolve_absolute(specifier)

        return None
    except (OSError, ValueError) as e:
        default_reporter(reporter).warning(
            f"Error resolving import path '{specifier}': {e}", importer
        )
        return None
