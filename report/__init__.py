"""Result aggregates produced by the reference matcher."""

from .model import (
    DirectoryImporterResult,
    ImportGroup,
    Importer,
    ImporterResult,
    ResolvedImport,
)

__all__ = [
    "DirectoryImporterResult",
    "ImportGroup",
    "Importer",
    "ImporterResult",
    "ResolvedImport",
]
