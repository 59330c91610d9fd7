"""
Prometheus collection for Hubitat hub devices.
"""
from typing import Dict, Optional

from .base import BaseCollector
from .collector import HubitatCollector
from .exceptions import HubitatConnectionError, HubitatDataError, HubitatError
from .models import Device, Observation, SkipReason, Skipped
from .registry import AttributeRegistry, MetricDescriptor, build_registry


def get_collector(address: str, access_token: str,
                  include_name_label: bool = False,
                  timeout: Optional[float] = None,
                  const_labels: Optional[Dict[str, str]] = None) -> HubitatCollector:
    """
    Factory function to build a collector for the chosen label variant.

    Args:
        address: Base URL of the hub
        access_token: Maker API access token
        include_name_label: Export the device "name" label as well
        timeout: Request timeout in seconds, None for no timeout
        const_labels: Labels appended to every sample

    Returns:
        Initialized collector instance
    """
    registry = build_registry(include_name=include_name_label)
    return HubitatCollector(
        address,
        access_token,
        registry,
        timeout=timeout,
        const_labels=const_labels
    )


__all__ = [
    "AttributeRegistry",
    "BaseCollector",
    "Device",
    "HubitatCollector",
    "HubitatConnectionError",
    "HubitatDataError",
    "HubitatError",
    "MetricDescriptor",
    "Observation",
    "SkipReason",
    "Skipped",
    "build_registry",
    "get_collector",
]
