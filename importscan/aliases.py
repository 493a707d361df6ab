"""Loading of import maps and tsconfig path mappings from a scan root."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .errors import ParseConfigError, ReadError
from .reporter import Reporter, default_reporter


logger = logging.getLogger(__name__)

IMPORT_MAP_FILENAME = "import_map.json"
TSCONFIG_FILENAME = "tsconfig.json"


@dataclass(frozen=True)
class AliasMap:
    """
    Specifier aliases read from an import map.

    ``imports`` keeps the declaration order of the file, which is also the
    order prefix matching walks the keys in.
    """

    imports: Mapping[str, str] = field(default_factory=dict)
    scopes: Mapping[str, Mapping[str, str]] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "imports", MappingProxyType(dict(self.imports)))
        object.__setattr__(
            self,
            "scopes",
            MappingProxyType({k: MappingProxyType(dict(v)) for k, v in self.scopes.items()}),
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AliasMap":
        """Build an AliasMap from the decoded JSON of an import map."""
        if not isinstance(data, dict):
            raise ParseConfigError("import map must be a JSON object")
        imports = data.get("imports") or {}
        scopes = data.get("scopes") or {}
        if not isinstance(imports, dict) or not all(
            isinstance(v, str) for v in imports.values()
        ):
            raise ParseConfigError("'imports' must map specifiers to path strings")
        if not isinstance(scopes, dict) or not all(isinstance(v, dict) for v in scopes.values()):
            raise ParseConfigError("'scopes' must map scope prefixes to objects")
        return cls(imports=imports, scopes=scopes)

    def __len__(self) -> int:
        return len(self.imports)


@dataclass(frozen=True)
class PathMapConfig:
    """
    Path-mapping patterns in the style of tsconfig ``compilerOptions.paths``.

    Attributes:
        base_dir: Directory the replacement templates are relative to.
        patterns: ``(pattern, templates)`` pairs in declaration order.
    """

    base_dir: str
    patterns: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()

    @classmethod
    def from_paths(cls, base_dir: str, paths: Mapping[str, Any]) -> "PathMapConfig":
        """Build a PathMapConfig from a ``paths`` object, keeping key order."""
        patterns = []
        for pattern, templates in paths.items():
            if not isinstance(templates, list) or not all(isinstance(t, str) for t in templates):
                raise ParseConfigError(f"paths entry '{pattern}' must be a list of strings")
            patterns.append((pattern, tuple(templates)))
        return cls(base_dir=base_dir, patterns=tuple(patterns))


@dataclass(frozen=True)
class AliasConfig:
    """Both kinds of alias configuration for one scan root; either may be absent."""

    import_map: Optional[AliasMap] = None
    path_map: Optional[PathMapConfig] = None

    def __bool__(self) -> bool:
        return self.import_map is not None or self.path_map is not None


def _read_json(path: Path) -> Optional[Any]:
    """Return the decoded JSON at ``path``, or None if the file does not exist."""
    if not path.is_file():
        return None
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ReadError(f"Error reading {path}: {e}") from e
    except UnicodeDecodeError as e:
        raise ParseConfigError(f"Error loading {path}: not valid UTF-8 ({e})") from e
    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ParseConfigError(f"Error loading {path}: {e}") from e


def load_import_map(root: Union[str, Path]) -> Optional[AliasMap]:
    """
    Load ``import_map.json`` from directly under ``root``.

    Args:
        root: Scan root directory.

    Returns:
        The AliasMap, or None if there is no import map.

    Raises:
        ParseConfigError: If the file is not valid JSON or has the wrong shape.
    """
    path = Path(root) / IMPORT_MAP_FILENAME
    data = _read_json(path)
    if data is None:
        return None
    try:
        alias_map = AliasMap.from_dict(data)
    except ParseConfigError as e:
        raise ParseConfigError(f"Error loading {path}: {e}") from e
    logger.debug("Loaded %d import map entries from %s", len(alias_map), path)
    return alias_map


def load_path_map(root: Union[str, Path]) -> Optional[PathMapConfig]:
    """
    Load path mappings from ``tsconfig.json`` directly under ``root``.

    Mappings only apply when both ``compilerOptions.baseUrl`` and
    ``compilerOptions.paths`` are present. ``baseUrl`` is anchored at the
    directory holding the tsconfig, so the resulting base directory is
    absolute and the importer directory does not affect mapped paths.

    Args:
        root: Scan root directory.

    Returns:
        The PathMapConfig, or None if there is no usable path mapping.

    Raises:
        ParseConfigError: If the file is not valid JSON or has the wrong shape.
    """
    path = Path(root) / TSCONFIG_FILENAME
    data = _read_json(path)
    if data is None:
        return None
    if not isinstance(data, dict):
        raise ParseConfigError(f"Error loading {path}: tsconfig must be a JSON object")

    options = data.get("compilerOptions") or {}
    if not isinstance(options, dict):
        raise ParseConfigError(f"Error loading {path}: 'compilerOptions' must be an object")

    base_url = options.get("baseUrl")
    paths = options.get("paths")
    if not base_url or paths is None:
        logger.debug("%s has no baseUrl/paths, path mapping disabled", path)
        return None
    if not isinstance(base_url, str) or not isinstance(paths, dict):
        raise ParseConfigError(f"Error loading {path}: invalid baseUrl or paths")

    base_dir = os.path.normpath(os.path.join(os.path.abspath(root), base_url))
    try:
        path_map = PathMapConfig.from_paths(base_dir, paths)
    except ParseConfigError as e:
        raise ParseConfigError(f"Error loading {path}: {e}") from e
    logger.debug("Loaded %d path patterns from %s", len(path_map.patterns), path)
    return path_map


def load_alias_config(
    root: Union[str, Path],
    reporter: Optional[Reporter] = None,
) -> AliasConfig:
    """
    Load the import map and path mappings for a scan root.

    A file that fails to load is reported as a warning and the scan goes on
    without it.

    Args:
        root: Scan root directory.
        reporter: Receives warnings; defaults to logging.

    Returns:
        AliasConfig with whatever could be loaded.
    """
    reporter = default_reporter(reporter)

    import_map: Optional[AliasMap] = None
    path_map: Optional[PathMapConfig] = None

    try:
        import_map = load_import_map(root)
    except (ParseConfigError, ReadError) as e:
        reporter.warning(f"Could not load import map: {e}")

    try:
        path_map = load_path_map(root)
    except (ParseConfigError, ReadError) as e:
        reporter.warning(f"Could not load tsconfig: {e}")

    return AliasConfig(import_map=import_map, path_map=path_map)
