"""Read the export list: which output goes to which variable.

One entry per line::

    # source_output,variable_name[,description]
    vpc_id,network_vpc_id,VPC of the shared network
    subnets,network_subnets

Blank lines and lines starting with ``#`` are ignored.  The description is
everything after the second comma, so it may itself contain commas.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NamedTuple

from tfvar_export.errors import InputError, NoEntriesError

logger = logging.getLogger(__name__)


class ExportEntry(NamedTuple):
    variable_name: str
    description: str | None


def parse_export_list(text: str, *, source: str = "<export list>") -> dict[str, ExportEntry]:
    """Parse export-list *text* into ``{output_name: ExportEntry}`` in file order."""
    entries: dict[str, ExportEntry] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        fields = line.split(",", 2)
        if len(fields) < 2:
            raise InputError(f"{source}:{lineno}: expected 'output,variable[,description]'")
        output_name, variable_name = fields[0].strip(), fields[1].strip()
        if not output_name or not variable_name:
            raise InputError(f"{source}:{lineno}: empty output or variable name")
        if output_name in entries:
            raise InputError(f"{source}:{lineno}: output '{output_name}' listed twice")
        description = fields[2].strip() if len(fields) == 3 else None
        entries[output_name] = ExportEntry(variable_name, description)

    if not entries:
        raise NoEntriesError(source)
    return entries


def read_export_list(path: Path | str) -> dict[str, ExportEntry]:
    """Read and parse an export-list file.

    Raises:
        InputError: If the file cannot be read or a line is malformed.
        NoEntriesError: If the file has no usable entry.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Failed to read {path}: {exc}") from exc
    entries = parse_export_list(text, source=str(path))
    logger.info("Read %d export entries from %s", len(entries), path)
    return entries
