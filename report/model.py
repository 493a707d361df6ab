"""Data model for import matches and their aggregates."""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class ResolvedImport:
    """One import in ``source_file`` that resolves to the target."""

    source_file: str
    import_path: str
    resolved_path: str
    line: int


@dataclass(frozen=True)
class Importer:
    """A file importing something from a target directory."""

    source_file: str
    import_path: str
    line: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sourceFile": self.source_file,
            "importPath": self.import_path,
            "line": self.line,
        }


@dataclass
class ImportGroup:
    """All importers of one file inside a target directory."""

    imported_file: str
    importers: List[Importer] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "importedFile": self.imported_file,
            "importers": [imp.to_dict() for imp in self.importers],
        }


@dataclass
class ImporterResult:
    """
    Result of a file-target search.

    ``importers`` holds one source path per matching import, in scan order.
    """

    target: str
    root: str
    importers: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.importers)

    @classmethod
    def from_matches(
        cls, target: str, root: str, matches: List[ResolvedImport]
    ) -> "ImporterResult":
        """Build a result from the matches returned by ``find_importers``."""
        return cls(target=target, root=root, importers=[m.source_file for m in matches])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "root": self.root,
            "count": self.count,
            "importers": list(self.importers),
        }


@dataclass
class DirectoryImporterResult:
    """
    Result of a directory-target search.

    Groups are sorted by imported file, importers within a group by source
    file. ``count`` is the number of importer entries over all groups.
    """

    target: str
    root: str
    groups: List[ImportGroup] = field(default_factory=list)

    @property
    def count(self) -> int:
        return sum(len(group.importers) for group in self.groups)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target": self.target,
            "root": self.root,
            "count": self.count,
            "groups": [group.to_dict() for group in self.groups],
        }
