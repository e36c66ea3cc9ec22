"""Local input files: outputs document and export list."""

from tfvar_export.sources.export_list import ExportEntry, parse_export_list, read_export_list
from tfvar_export.sources.outputs import OutputValue, get_outputs
from tfvar_export.sources.targets import build_targets, load_targets

__all__ = [
    "ExportEntry",
    "OutputValue",
    "build_targets",
    "get_outputs",
    "load_targets",
    "parse_export_list",
    "read_export_list",
]
