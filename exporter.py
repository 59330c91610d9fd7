#!/usr/bin/env python3
"""
Hubitat Exporter - Prometheus exporter for Hubitat hub device sensors.

Supports:
- On-demand collection: the hub is queried once per scrape
- Temperature, humidity, pressure and battery gauges per device
- Optional device "name" label
- Configuration via flags, environment variables or a YAML file
"""
import logging
import sys
import time
from typing import List, Optional

from prometheus_client import REGISTRY, CollectorRegistry, start_http_server

from config_loader import Config, ConfigError, ConfigLoader
from hubitat import HubitatCollector, get_collector

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO"):
    """Configure root logging for the exporter process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )


def initialize_collector(config: Config) -> HubitatCollector:
    """
    Initialize collector based on config.

    Args:
        config: Exporter configuration

    Returns:
        Initialized collector instance
    """
    collector = get_collector(
        config.hubitat_address,
        config.hubitat_access_token,
        include_name_label=config.include_name_label,
        timeout=config.timeout,
        const_labels={"hubitat_address": config.hubitat_address}
    )
    logger.info(f"✅ Collector initialized: {collector.__class__.__name__}")
    return collector


def register_collector(collector: HubitatCollector,
                       registry: CollectorRegistry = REGISTRY):
    """Register the on-demand collector with a Prometheus registry."""
    registry.register(collector)
    logger.info("✅ On-demand collector registered")


def serve(config: Config, registry: CollectorRegistry = REGISTRY):
    """
    Start the Prometheus HTTP server for the given config.

    Args:
        config: Exporter configuration
        registry: Registry exposed on /metrics
    """
    host, port = config.listen_host_port
    start_http_server(port, addr=host, registry=registry)
    logger.info(f"📊 Prometheus metrics endpoint started on {host}:{port}/metrics")


def main(argv: Optional[List[str]] = None):
    """Main exporter entry point"""
    setup_logging()

    try:
        config = ConfigLoader().load(argv)
    except ConfigError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    logging.getLogger().setLevel(config.log_level)
    logger.info("🚀 Hubitat Exporter starting...")

    collector = initialize_collector(config)
    register_collector(collector)
    serve(config)

    logger.info("✅ Exporter fully initialized - waiting for scrape requests")

    # Scrapes are served from the HTTP server's threads
    while True:
        time.sleep(60)


def run():
    """Console script entry point"""
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Exporter stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    run()
