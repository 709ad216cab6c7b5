"""Snippet → uni-app conversion engine."""

from unigalaxy.conversion.engine import (
    ConversionError,
    ConversionPass,
    ConversionReport,
    CorpusSummary,
    convert,
    discover_sources,
)
from unigalaxy.conversion.naming import format_component_name, kebab_name, pascal_name, pascal_to_kebab

__all__ = [
    "ConversionError",
    "ConversionPass",
    "ConversionReport",
    "CorpusSummary",
    "convert",
    "discover_sources",
    "format_component_name",
    "kebab_name",
    "pascal_name",
    "pascal_to_kebab",
]
