# © Copyright 2025 Stuart Parmenter
# SPDX-License-Identifier: MIT

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Set


class FieldType(Enum):
    """Field data types for validation."""
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    FLOAT = "float"


@dataclass
class FieldDef:
    """Definition of a control protocol field."""
    name: str
    field_type: FieldType
    required_for: Set[str]  # Operations that require this field
    description: str = ""
    validator: Optional[Callable[[Any], bool]] = None


def _is_strict_bool(value: Any) -> bool:
    # JSON true/false only; 0/1 and "true" are rejected
    return isinstance(value, bool)


class ControlFields:
    """Centralized field definitions and validation for control protocol."""

    TYPE = FieldDef("type", FieldType.STRING, {"hello"},
                    "Message type (WebSocket only)")
    DATA = FieldDef("data", FieldType.BOOLEAN, {"toggle"},
                    "True selects grayscale, False selects color", _is_strict_bool)
    TIMESTAMP = FieldDef("t", FieldType.INTEGER, set(),
                         "Timestamp for ping/pong")
    DEVICE_ID = FieldDef("device_id", FieldType.STRING, set(),
                         "Client device identifier", lambda x: len(str(x).strip()) > 0)

    # All fields registry
    ALL_FIELDS = {
        "type": TYPE, "data": DATA, "t": TIMESTAMP, "device_id": DEVICE_ID,
    }

    @classmethod
    def validate_fields(cls, params: Dict[str, Any], operation: str) -> None:
        """Validate the fields of a control message for an operation.

        Raises:
            ValueError: if a required field is missing or a field fails validation
        """
        for name, field_def in cls.ALL_FIELDS.items():
            if operation in field_def.required_for and name not in params:
                raise ValueError(f"missing field '{name}' for {operation}")

        for name, value in params.items():
            field_def = cls.ALL_FIELDS.get(name)
            if field_def is None or field_def.validator is None:
                continue
            try:
                valid = field_def.validator(value)
            except (ValueError, TypeError):
                valid = False
            if not valid:
                raise ValueError(f"invalid value for '{name}': {value!r}")

