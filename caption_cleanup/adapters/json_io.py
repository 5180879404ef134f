"""JSON payload adapters: schema-validated parsing and wire serialization.

WHY: Captions arrive as JSON written by the transcription step, and cut
maps arrive from the segment-selection step. A malformed payload (a
missing endMs, a string where a number belongs) would otherwise surface
deep inside a stage as a confusing TypeError. Validating at the boundary
gives one clear error pointing at the bad field.

HOW: Payloads are validated with jsonschema against the bundled schemas
in caption_cleanup/schemas/, then converted to frozen records via
from_dict(). Serializers emit the camelCase wire form via to_dict().

RULES:
- Schemas are loaded once and cached
- Validation errors raise PayloadValidationError with the JSON path
- Extra fields in a payload are ignored
- Serializers never emit null optional fields
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import jsonschema

from caption_cleanup.core.ir import Caption, CleanupLogEntry, CutMapEntry, Page

_SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"

_CACHED_SCHEMAS: Dict[str, dict] = {}


class PayloadValidationError(ValueError):
    """Raised when a JSON payload does not match its schema.

    RULES:
    - path is the JSON path to the offending value, e.g. "$[3].endMs"
    - The message includes the path and jsonschema's description
    """

    def __init__(self, kind: str, path: str, message: str) -> None:
        self.kind = kind
        self.path = path
        super().__init__("Invalid {} payload at {}: {}".format(kind, path, message))


def _get_schema(name: str) -> dict:
    """Load and cache a bundled JSON schema by file stem."""
    if name not in _CACHED_SCHEMAS:
        with open(_SCHEMA_DIR / "{}.schema.json".format(name), encoding="utf-8") as f:
            _CACHED_SCHEMAS[name] = json.load(f)
    return _CACHED_SCHEMAS[name]


def _validate(data: Any, name: str, kind: str) -> None:
    try:
        jsonschema.validate(instance=data, schema=_get_schema(name))
    except jsonschema.ValidationError as exc:
        raise PayloadValidationError(kind, exc.json_path, exc.message) from exc


def _load(data: Any) -> Any:
    """Accept either parsed JSON or a raw JSON string."""
    if isinstance(data, (str, bytes)):
        return json.loads(data)
    return data


def captions_from_json(data: Any) -> List[Caption]:
    """Parse a caption list payload (raw JSON text or parsed list).

    Raises:
        PayloadValidationError: If the payload does not match the schema.
        json.JSONDecodeError: If a string payload is not valid JSON.
    """
    data = _load(data)
    _validate(data, "captions", "captions")
    return [Caption.from_dict(item) for item in data]


def cut_map_from_json(data: Any) -> List[CutMapEntry]:
    """Parse a cut-map payload (raw JSON text or parsed list)."""
    data = _load(data)
    _validate(data, "cut_map", "cut map")
    return [CutMapEntry.from_dict(item) for item in data]


def captions_to_json(captions: Sequence[Caption], indent: Optional[int] = 2) -> str:
    return json.dumps([c.to_dict() for c in captions], indent=indent, ensure_ascii=False)


def pages_to_json(pages: Sequence[Page], indent: Optional[int] = 2) -> str:
    return json.dumps([p.to_dict() for p in pages], indent=indent, ensure_ascii=False)


def cleanup_log_to_json(log: Sequence[CleanupLogEntry], indent: Optional[int] = 2) -> str:
    """Serialize the cleanup audit log in its wire form."""
    return json.dumps([e.to_dict() for e in log], indent=indent, ensure_ascii=False)
