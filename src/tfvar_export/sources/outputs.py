"""Read the output values file generated with ``terraform output -json``."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, JsonValue

from tfvar_export.errors import InputError

logger = logging.getLogger(__name__)


class OutputValue(BaseModel):
    name: str
    value: JsonValue


def get_outputs(path: Path | str) -> list[OutputValue]:
    """Return the non-sensitive outputs of *path*, in document order.

    Outputs flagged ``"sensitive": true`` are never exported.

    Raises:
        InputError: If the file cannot be read or is not an outputs document.
    """
    path = Path(path)
    try:
        doc = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise InputError(f"Failed to read {path}: {exc}") from exc
    except ValueError as exc:
        raise InputError(f"Invalid JSON in {path}: {exc}") from exc

    if not isinstance(doc, dict):
        raise InputError(f"{path}: expected a JSON object of outputs")

    outputs: list[OutputValue] = []
    skipped = 0
    for name, entry in doc.items():
        if not isinstance(entry, dict) or "value" not in entry:
            raise InputError(f"{path}: output '{name}' has no 'value'")
        if entry.get("sensitive") is True:
            skipped += 1
            continue
        outputs.append(OutputValue(name=name, value=entry["value"]))

    logger.info("Read %d outputs from %s (%d sensitive skipped)", len(outputs), path, skipped)
    return outputs
