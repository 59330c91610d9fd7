"""
Base collector abstract class for on-demand Prometheus collection.
"""
from abc import ABC, abstractmethod
from typing import Dict, Iterator, List, Optional
import logging

from prometheus_client.core import GaugeMetricFamily

from .exceptions import HubitatError
from .models import Observation
from .registry import AttributeRegistry


class BaseCollector(ABC):
    """
    Abstract base class for scrape-driven collectors.

    Subclasses implement get_observations(); this class turns the result into
    gauge families whenever the Prometheus registry calls collect().
    """

    def __init__(self, registry: AttributeRegistry,
                 const_labels: Optional[Dict[str, str]] = None):
        """
        Initialize collector.

        Args:
            registry: Attribute registry describing the exported series
            const_labels: Labels appended to every sample (e.g. hub address)
        """
        self.registry = registry
        self.const_labels = dict(const_labels or {})
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def get_observations(self) -> List[Observation]:
        """
        Collect the current observations.

        Returns:
            List of Observation, one per exported (device, attribute) pair

        Raises:
            HubitatError: If the scrape cannot produce any observations
        """
        pass

    def safe_get_observations(self) -> List[Observation]:
        """
        Wrapper that catches exceptions and returns an empty list on failure.
        A failed scrape yields fewer series, never an error response.

        Returns:
            Observations, or an empty list if collection failed
        """
        try:
            return self.get_observations()
        except HubitatError as e:
            self.logger.error(f"❌ Metric collection failed: {e}")
            return []
        except Exception as e:
            self.logger.exception(f"❌ Unexpected error during collection: {e}")
            return []

    def _new_family(self, descriptor) -> GaugeMetricFamily:
        return GaugeMetricFamily(
            descriptor.name,
            descriptor.help,
            labels=list(descriptor.label_names) + list(self.const_labels)
        )

    def describe(self) -> Iterator[GaugeMetricFamily]:
        """Yield empty families so registration does not trigger a scrape."""
        for descriptor in self.registry.descriptors():
            yield self._new_family(descriptor)

    def collect(self) -> Iterator[GaugeMetricFamily]:
        """Called by Prometheus when scraping /metrics"""
        families = {}
        const_values = list(self.const_labels.values())

        for observation in self.safe_get_observations():
            descriptor = observation.descriptor
            family = families.get(descriptor.name)
            if family is None:
                family = self._new_family(descriptor)
                families[descriptor.name] = family
            family.add_metric(
                list(observation.label_values) + const_values,
                observation.value
            )

        yield from families.values()
