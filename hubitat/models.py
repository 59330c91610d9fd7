"""
Data models for hub devices and the observations derived from them.
"""
import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .exceptions import HubitatDataError
from .registry import MetricDescriptor

DEVICE_FIELDS = ("name", "label", "type", "model", "manufacturer", "room")

# Plain decimal notation only: no whitespace, no hex, no inf/nan, no underscores
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class Device:
    """One device reported by the hub at scrape time."""

    name: str = ""
    label: str = ""
    type: str = ""
    model: str = ""
    manufacturer: str = ""
    room: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Device":
        """
        Build a Device from one decoded JSON object.

        Missing or null fields become empty strings. Any other non-string
        value is a schema mismatch.

        Raises:
            HubitatDataError: If the object does not match the device schema
        """
        if not isinstance(data, dict):
            raise HubitatDataError(
                f"Expected device object, got {type(data).__name__}"
            )

        values = {name: _string_field(data, name) for name in DEVICE_FIELDS}

        raw_attributes = data.get("attributes")
        if raw_attributes is None:
            raw_attributes = {}
        if not isinstance(raw_attributes, dict):
            raise HubitatDataError(
                f"Expected attributes object, got {type(raw_attributes).__name__}"
            )

        attributes = {}
        for key, value in raw_attributes.items():
            if value is None:
                value = ""
            elif not isinstance(value, str):
                raise HubitatDataError(
                    f"Attribute {key!r} has non-string value {value!r}"
                )
            attributes[key] = value

        return cls(attributes=attributes, **values)

    def label_values(self, label_names: Tuple[str, ...]) -> List[str]:
        """Return this device's values for the given label names, in order."""
        return [getattr(self, name) for name in label_names]


def _string_field(data: dict, name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise HubitatDataError(
            f"Device field {name!r} has non-string value {value!r}"
        )
    return value


def decode_devices(payload: Any) -> List[Device]:
    """
    Decode the hub's device listing into Device records.

    Args:
        payload: Parsed JSON body of the device listing

    Returns:
        List of devices (empty for a JSON null body). A null entry
        decodes to an empty Device.

    Raises:
        HubitatDataError: If the payload is not a list of device objects
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise HubitatDataError(
            f"Expected a list of devices, got {type(payload).__name__}"
        )
    return [
        Device() if item is None else Device.from_dict(item)
        for item in payload
    ]


def parse_value(raw: str) -> Optional[float]:
    """
    Parse a raw attribute string as a finite decimal number.

    Returns:
        The float value, or None if the string is not a finite decimal
    """
    if not _DECIMAL_RE.fullmatch(raw):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True)
class Observation:
    """One gauge sample derived from a device attribute."""

    descriptor: MetricDescriptor
    label_values: Tuple[str, ...]
    value: float


class SkipReason(Enum):
    """Why an attribute produced no observation."""

    UNKNOWN_ATTRIBUTE = "unknown_attribute"
    UNPARSABLE_VALUE = "unparsable_value"


@dataclass(frozen=True)
class Skipped:
    """An attribute that produced no observation."""

    key: str
    raw_value: str
    reason: SkipReason


TranslationResult = Union[Observation, Skipped]
