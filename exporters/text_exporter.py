"""Plain-text exporter for importer results (human-friendly format)."""

from typing import List, Union

from report.model import DirectoryImporterResult, ImporterResult


def to_text(result: Union[ImporterResult, DirectoryImporterResult]) -> str:
    """
    Render a search result as plain text.

    Args:
        result: File or directory search result.

    Returns:
        Text without a trailing newline.
    """
    if isinstance(result, DirectoryImporterResult):
        return _directory_text(result)
    return _file_text(result)


def _file_text(result: ImporterResult) -> str:
    lines: List[str] = []

    if result.count == 0:
        lines.append(f'No files import "{result.target}"')
    elif result.count == 1:
        lines.append(f'1 file imports "{result.target}":')
    else:
        lines.append(f'{result.count} files import "{result.target}":')

    if result.count > 0:
        lines.append("Importers:")
        for importer in result.importers:
            lines.append(f"  {importer}")

    return "\n".join(lines)


def _directory_text(result: DirectoryImporterResult) -> str:
    if result.count == 0:
        return f'No files import anything from directory "{result.target}"'

    lines: List[str] = []
    for i, group in enumerate(result.groups):
        # Every second group puts "imported by" on its own line.
        if i % 2 == 0:
            lines.append(f"file {group.imported_file} imported by")
        else:
            lines.append(f"file {group.imported_file}")
            lines.append("imported by")
        for importer in group.importers:
            lines.append(f" {importer.source_file}")

    return "\n".join(lines)
