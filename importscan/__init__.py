"""Import scanner: find the files that import a given file or directory."""

from .aliases import (
    AliasConfig,
    AliasMap,
    PathMapConfig,
    load_alias_config,
    load_import_map,
    load_path_map,
)
from .discovery import DEFAULT_EXTENSIONS, DEFAULT_IGNORE, iter_files, scan
from .errors import (
    ImportScanError,
    InvalidTargetError,
    NotFoundError,
    ParseConfigError,
    ReadError,
    TargetNotFoundError,
)
from .extractor import ImportKind, RawImport, extract_imports, parse_imports
from .matcher import find_directory_importers, find_importers, find_target_importers
from .reporter import CollectingReporter, LoggingReporter, Reporter, ScanWarning
from .resolver import RESOLVE_EXTENSIONS, resolve_import_path

__version__ = "0.1.0"

__all__ = [
    "AliasConfig",
    "AliasMap",
    "PathMapConfig",
    "load_alias_config",
    "load_import_map",
    "load_path_map",
    "DEFAULT_EXTENSIONS",
    "DEFAULT_IGNORE",
    "iter_files",
    "scan",
    "ImportScanError",
    "InvalidTargetError",
    "NotFoundError",
    "ParseConfigError",
    "ReadError",
    "TargetNotFoundError",
    "ImportKind",
    "RawImport",
    "extract_imports",
    "parse_imports",
    "find_directory_importers",
    "find_importers",
    "find_target_importers",
    "CollectingReporter",
    "LoggingReporter",
    "Reporter",
    "ScanWarning",
    "RESOLVE_EXTENSIONS",
    "resolve_import_path",
]
