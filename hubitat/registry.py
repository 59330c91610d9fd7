"""
Attribute registry: maps known hub attribute names to metric descriptors.
"""
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Optional, Tuple

METRIC_PREFIX = "hubitat_"

DEVICE_LABELS = ("label", "model", "manufacturer", "room")
NAME_LABEL = "name"

# attribute key -> (series suffix, help text)
KNOWN_ATTRIBUTES = {
    "temperature": ("temperature_celsius", "Temperature in degrees Celsius."),
    "humidity": ("humidity_percent", "Relative humidity in percent."),
    "pressure": ("pressure_hpa", "Atmospheric pressure in hectopascals."),
    "battery": ("battery_percent", "Battery level in percent."),
}


@dataclass(frozen=True)
class MetricDescriptor:
    """Static definition of one exported gauge series."""

    name: str
    help: str
    label_names: Tuple[str, ...]


class AttributeRegistry:
    """
    Immutable lookup table from attribute key to MetricDescriptor.

    Built once at startup and shared by every scrape; lookups never mutate
    state, so concurrent scrapes can read it without locking.
    """

    def __init__(self, descriptors: Dict[str, MetricDescriptor]):
        self._descriptors = MappingProxyType(dict(descriptors))

    def lookup(self, key: str) -> Optional[MetricDescriptor]:
        """
        Return the descriptor for an attribute key.

        Args:
            key: Attribute name as reported by the hub

        Returns:
            MetricDescriptor, or None if the attribute is not exported
        """
        return self._descriptors.get(key)

    def descriptors(self) -> List[MetricDescriptor]:
        return list(self._descriptors.values())

    def __contains__(self, key) -> bool:
        return key in self._descriptors

    def __iter__(self) -> Iterator[str]:
        return iter(self._descriptors)

    def __len__(self) -> int:
        return len(self._descriptors)


def label_schema(include_name: bool = False) -> Tuple[str, ...]:
    """Return the ordered label names for the chosen variant."""
    if include_name:
        return (NAME_LABEL,) + DEVICE_LABELS
    return DEVICE_LABELS


def build_registry(include_name: bool = False) -> AttributeRegistry:
    """
    Build the registry of known attributes.

    Args:
        include_name: Prepend the device "name" label to every series

    Returns:
        AttributeRegistry with one descriptor per known attribute
    """
    labels = label_schema(include_name)
    return AttributeRegistry({
        key: MetricDescriptor(METRIC_PREFIX + suffix, help_text, labels)
        for key, (suffix, help_text) in KNOWN_ATTRIBUTES.items()
    })
