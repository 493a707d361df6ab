"""JSON exporter for importer results (machine-friendly format)."""

import json
from typing import Union

from report.model import DirectoryImporterResult, ImporterResult


def to_json(
    result: Union[ImporterResult, DirectoryImporterResult],
    indent: int = 2,
) -> str:
    """
    Convert a search result to JSON.

    File targets produce ``{target, root, count, importers}``; directory
    targets produce ``{target, root, count, groups}``.

    Args:
        result: File or directory search result.
        indent: JSON indentation level.

    Returns:
        JSON string representation of the result.
    """
    return json.dumps(result.to_dict(), indent=indent)
