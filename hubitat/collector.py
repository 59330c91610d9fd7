"""
Hubitat collector.
Fetches the device listing from the hub's Maker API on every scrape.
"""
from typing import Dict, List, Optional

import requests

from .base import BaseCollector
from .exceptions import HubitatConnectionError, HubitatDataError
from .models import (
    Device,
    Observation,
    SkipReason,
    Skipped,
    TranslationResult,
    decode_devices,
    parse_value,
)
from .registry import AttributeRegistry

DEVICES_PATH = "/apps/api/4/devices/all"


class HubitatCollector(BaseCollector):
    """
    Collector for sensor and battery attributes of Hubitat devices.

    Holds only immutable connection settings. Every scrape performs its own
    request, so overlapping scrapes need no coordination and may observe
    different hub states.

    Architecture:
    Prometheus scrape → collect() → GET devices/all → Device → Observation
    """

    def __init__(self, address: str, access_token: str,
                 registry: AttributeRegistry,
                 timeout: Optional[float] = None,
                 const_labels: Optional[Dict[str, str]] = None):
        """
        Args:
            address: Base URL of the hub, e.g. http://192.168.1.10
            access_token: Maker API access token
            registry: Known attributes and their descriptors
            timeout: Request timeout in seconds, None to wait indefinitely
            const_labels: Labels appended to every sample
        """
        super().__init__(registry, const_labels)
        self.address = address.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout

        self.logger.info("Hubitat collector initialized")
        self.logger.info(f"  Hub address: {self.address}")
        self.logger.info(f"  Timeout: {self.timeout}")

    @property
    def url(self) -> str:
        return self.address + DEVICES_PATH

    def fetch_devices(self) -> List[Device]:
        """
        Fetch and decode the hub's device listing.

        Returns:
            List of devices

        Raises:
            HubitatConnectionError: If the request fails
            HubitatDataError: If the body is not a valid device listing
        """
        try:
            response = requests.get(
                self.url,
                params={"access_token": self.access_token},
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            raise HubitatConnectionError(
                f"Timeout fetching devices from {self.address} (>{self.timeout}s)"
            ) from e
        except requests.exceptions.RequestException as e:
            raise HubitatConnectionError(
                f"Error getting devices from {self.address}: {e}"
            ) from e

        with response:
            try:
                response.raise_for_status()
            except requests.exceptions.HTTPError as e:
                raise HubitatConnectionError(
                    f"HTTP error getting devices: {response.status_code}"
                ) from e

            try:
                payload = response.json()
            except ValueError as e:
                raise HubitatDataError(f"Error decoding devices: {e}") from e

            return decode_devices(payload)

    def translate_attribute(self, device: Device, key: str,
                            raw_value: str) -> TranslationResult:
        """
        Translate one raw attribute into an Observation or a skip.

        Args:
            device: Device owning the attribute
            key: Attribute name
            raw_value: Raw string value reported by the hub

        Returns:
            Observation, or Skipped with the reason
        """
        descriptor = self.registry.lookup(key)
        if descriptor is None:
            return Skipped(key, raw_value, SkipReason.UNKNOWN_ATTRIBUTE)

        value = parse_value(raw_value)
        if value is None:
            self.logger.warning(
                f"Error parsing value {raw_value!r} for attribute {key!r} "
                f"of device {device.label!r}"
            )
            return Skipped(key, raw_value, SkipReason.UNPARSABLE_VALUE)

        return Observation(
            descriptor,
            tuple(device.label_values(descriptor.label_names)),
            value
        )

    def translate_device(self, device: Device) -> List[TranslationResult]:
        return [
            self.translate_attribute(device, key, raw_value)
            for key, raw_value in device.attributes.items()
        ]

    def get_observations(self) -> List[Observation]:
        devices = self.fetch_devices()
        self.logger.debug(f"Fetched {len(devices)} devices")

        observations = []
        for device in devices:
            for result in self.translate_device(device):
                if isinstance(result, Observation):
                    observations.append(result)
        return observations
