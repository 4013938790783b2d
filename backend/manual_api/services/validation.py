"""
Field validation for user manual payloads.

Pure functions: no database, no I/O. The service calls
``validate_manual`` before it ever touches the store, and only calls
``clean_fields`` once the payload came back clean.

Two modes:
- "create": title is required.
- "update": every field is optional, but a key that IS present must still
  satisfy its rule (so {"title": ""} is rejected, while {} changes nothing).
"""

import re
from typing import Any, Literal

from manual_api.services import links

Mode = Literal["create", "update"]

TITLE_MAX_LENGTH = 1000
DESCRIPTION_MAX_LENGTH = 5000
# BigInteger column
SERIAL_NUMBER_MAX = 2**63 - 1
SERIAL_NUMBER_MAX_DIGITS = len(str(SERIAL_NUMBER_MAX))

MANUAL_FIELDS = ("title", "serial_number", "description", "video_link")

_INTEGER_RE = re.compile(r"^[+-]?[0-9]+\Z")


def _label(field: str) -> str:
    return field.replace("_", " ")


def _check_title(payload: dict[str, Any], mode: Mode) -> list[str]:
    if "title" not in payload:
        return [f"The {_label('title')} field is required."] if mode == "create" else []

    title = payload["title"]
    if title is None or (isinstance(title, str) and not title.strip()):
        return [f"The {_label('title')} field is required."]
    if not isinstance(title, str):
        return [f"The {_label('title')} field must be a string."]
    if len(title) > TITLE_MAX_LENGTH:
        return [
            f"The {_label('title')} field must not be greater than "
            f"{TITLE_MAX_LENGTH} characters."
        ]
    return []


def _check_serial_number(payload: dict[str, Any]) -> list[str]:
    value = payload.get("serial_number")
    if value is None:
        return []
    # bool is a subclass of int, and JSON true/false is not a serial number
    if isinstance(value, bool) or not (
        isinstance(value, int)
        or (isinstance(value, str) and _INTEGER_RE.match(value.strip()))
    ):
        return [f"The {_label('serial_number')} field must be an integer."]
    if isinstance(value, str):
        # Count digits before int(): huge strings would trip the
        # interpreter's int conversion limit
        digits = value.strip().lstrip("+-").lstrip("0")
        if len(digits) > SERIAL_NUMBER_MAX_DIGITS:
            return [f"The {_label('serial_number')} field is out of range."]
        value = int(value.strip())
    if abs(value) > SERIAL_NUMBER_MAX:
        return [f"The {_label('serial_number')} field is out of range."]
    return []


def _check_description(payload: dict[str, Any]) -> list[str]:
    value = payload.get("description")
    if value is None:
        return []
    if not isinstance(value, str):
        return [f"The {_label('description')} field must be a string."]
    if len(value) > DESCRIPTION_MAX_LENGTH:
        return [
            f"The {_label('description')} field must not be greater than "
            f"{DESCRIPTION_MAX_LENGTH} characters."
        ]
    return []


def _check_video_link(payload: dict[str, Any]) -> list[str]:
    value = payload.get("video_link")
    if value is None:
        return []
    if not isinstance(value, str):
        return [f"The {_label('video_link')} field must be a string."]
    if not links.accepts(value):
        return [f"The {_label('video_link')} field format is invalid."]
    return []


def validate_manual(payload: dict[str, Any], mode: Mode) -> dict[str, list[str]]:
    """Validate a candidate field set.

    Args:
        payload: Raw request body (already JSON-decoded).
        mode: "create" or "update".

    Returns:
        Empty dict when valid, otherwise field name -> list of messages.
        Every field is checked, so the caller sees all problems at once.
    """
    checks = {
        "title": _check_title(payload, mode),
        "serial_number": _check_serial_number(payload),
        "description": _check_description(payload),
        "video_link": _check_video_link(payload),
    }
    return {field: messages for field, messages in checks.items() if messages}


def clean_fields(payload: dict[str, Any]) -> dict[str, Any]:
    """Keep only known fields that are present, with serial_number as int.

    Must only be called on a payload that passed ``validate_manual``.
    """
    fields = {key: payload[key] for key in MANUAL_FIELDS if key in payload}
    if fields.get("serial_number") is not None:
        fields["serial_number"] = int(str(fields["serial_number"]).strip())
    return fields
