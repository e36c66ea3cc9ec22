"""Merge outputs with the export list into variable targets."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tfvar_export.engine.engine import check_unique_names
from tfvar_export.engine.types import VariableTarget
from tfvar_export.errors import MissingOutputError
from tfvar_export.sources.export_list import read_export_list
from tfvar_export.sources.outputs import get_outputs

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from tfvar_export.sources.export_list import ExportEntry
    from tfvar_export.sources.outputs import OutputValue


def build_targets(
    outputs: Sequence[OutputValue], export_list: Mapping[str, ExportEntry]
) -> list[VariableTarget]:
    """Build one target per export entry, in export-list order.

    Raises:
        MissingOutputError: If an entry names an absent (or sensitive) output.
        DuplicateTargetError: If two entries export to the same variable name.
    """
    values = {o.name: o.value for o in outputs}
    targets: list[VariableTarget] = []
    for output_name, entry in export_list.items():
        if output_name not in values:
            raise MissingOutputError(output_name)
        targets.append(
            VariableTarget(
                name=entry.variable_name,
                description=entry.description,
                value=values[output_name],
            )
        )
    check_unique_names(targets)
    return targets


def load_targets(outputs_path: Path | str, export_list_path: Path | str) -> list[VariableTarget]:
    """Read both input files and return the merged targets."""
    export_list = read_export_list(export_list_path)
    return build_targets(get_outputs(outputs_path), export_list)
