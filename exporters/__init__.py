"""Exporters for converting importer results to various output formats."""

from .text_exporter import to_text
from .json_exporter import to_json
from .yaml_exporter import to_yaml
from .mermaid_exporter import to_mermaid

__all__ = ["to_text", "to_json", "to_yaml", "to_mermaid"]
