"""Mermaid flowchart exporter for importer results."""

import os
import re
from typing import Dict, List, Set, Tuple, Union

from report.model import DirectoryImporterResult, ImporterResult


def to_mermaid(
    result: Union[ImporterResult, DirectoryImporterResult],
    orientation: str = "LR",
) -> str:
    """
    Convert a search result to Mermaid flowchart syntax.

    Every importer points at what it imports. For directory targets the
    imported files are drawn inside a subgraph named after the directory.

    Args:
        result: File or directory search result.
        orientation: Flowchart orientation (LR, TD, TB, RL, BT).

    Returns:
        Mermaid flowchart string.
    """
    lines = [f"flowchart {orientation}"]

    if isinstance(result, DirectoryImporterResult):
        lines.extend(_generate_directory_mermaid(result))
    else:
        lines.extend(_generate_file_mermaid(result))

    return "\n".join(lines)


def _generate_file_mermaid(result: ImporterResult) -> List[str]:
    """Generate a star of importers around the target file."""
    lines = []
    used: Set[str] = set()
    target_id = _unique_id(f"target_{result.target}", used)
    lines.append(f'    {target_id}["{_get_label(result.target, result.root)}"]')
    lines.append(f"    style {target_id} stroke:#0066cc,stroke-width:2px")

    sources = sorted(set(result.importers))
    node_ids = {source: _unique_id(source, used) for source in sources}
    for source in sources:
        lines.append(f'    {node_ids[source]}["{_get_label(source, result.root)}"]')

    if sources:
        lines.append("")
    for source in sources:
        lines.append(f"    {node_ids[source]} --> {target_id}")

    return lines


def _generate_directory_mermaid(result: DirectoryImporterResult) -> List[str]:
    """Generate importer nodes and a subgraph holding the imported files."""
    lines = []

    used: Set[str] = set()
    subgraph_id = _unique_id(f"dir_{result.target}", used)
    imported_ids: Dict[str, str] = {
        group.imported_file: _unique_id(f"imported_{group.imported_file}", used)
        for group in result.groups
    }
    source_ids: Dict[str, str] = {}
    edges: List[Tuple[str, str]] = []
    for group in result.groups:
        for importer in group.importers:
            source = importer.source_file
            if source not in source_ids:
                source_ids[source] = _unique_id(source, used)
            edge = (source_ids[source], imported_ids[group.imported_file])
            if edge not in edges:
                edges.append(edge)

    lines.append(f"    subgraph {subgraph_id}[{_get_label(result.target, result.root)}]")
    for imported_file in sorted(imported_ids):
        lines.append(f'        {imported_ids[imported_file]}["{imported_file}"]')
    lines.append("    end")
    lines.append("")

    for source in sorted(source_ids):
        lines.append(f'    {source_ids[source]}["{_get_label(source, result.root)}"]')

    if edges:
        lines.append("")
    for source_id, imported_id in edges:
        lines.append(f"    {source_id} --> {imported_id}")

    return lines


def _sanitize_id_simple(value: str) -> str:
    """Sanitize a string to be a valid Mermaid ID."""
    # Replace path separators and dots with underscores
    sanitized = re.sub(r"[/\\.\-]", "_", value)
    # Remove any remaining invalid characters
    sanitized = re.sub(r"[^a-zA-Z0-9_]", "", sanitized)
    # Ensure it starts with a letter
    if sanitized and not sanitized[0].isalpha():
        sanitized = "n_" + sanitized
    return sanitized or "unknown"


def _get_label(path: str, root: str) -> str:
    """Get the display label for a node: relative to root when inside it."""
    abs_path = os.path.abspath(path)
    abs_root = os.path.abspath(root)
    if abs_path == abs_root or abs_path.startswith(abs_root.rstrip(os.sep) + os.sep):
        return os.path.relpath(abs_path, abs_root).replace("\\", "/")
    return path.replace("\\", "/")


def _unique_id(value: str, used: Set[str]) -> str:
    """Sanitize ``value`` and add a numeric suffix until the ID is unused."""
    base = _sanitize_id_simple(value)
    node_id = base
    suffix = 2
    while node_id in used:
        node_id = f"{base}_{suffix}"
        suffix += 1
    used.add(node_id)
    return node_id
