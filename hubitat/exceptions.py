"""
Exceptions raised while talking to a Hubitat hub.
"""


class HubitatError(Exception):
    """Base exception for Hubitat collection errors."""


class HubitatConnectionError(HubitatError):
    """The device listing could not be fetched from the hub."""


class HubitatDataError(HubitatError):
    """The hub response could not be decoded into devices."""
