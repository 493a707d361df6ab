"""YAML exporter for importer results."""

from typing import Union

import yaml

from report.model import DirectoryImporterResult, ImporterResult


def to_yaml(result: Union[ImporterResult, DirectoryImporterResult]) -> str:
    """
    Convert a search result to YAML with the same structure as the JSON export.

    Args:
        result: File or directory search result.

    Returns:
        YAML document string.
    """
    return yaml.safe_dump(
        result.to_dict(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
