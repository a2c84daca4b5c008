"""Application startup.

Builds the process-wide, read-only services exactly once: configuration,
logging, the species reference, resolver, matcher and the detection client.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from config.service import ConfigurationService, ConfigurationServiceFactory
from core.container import Container
from core.log_setup import configure_logging
from services.fish_api_client import FishApiClient
from species.matcher import SpeciesMatcher
from species.reference import SpeciesReference, load_reference
from species.resolver import SpeciesResolver


@dataclass(frozen=True)
class FishdexContext:
    """Handle returned by :func:`initialize`; pass it to whatever needs the core."""
    config: ConfigurationService
    container: Container

    @property
    def reference(self) -> SpeciesReference:
        return self.container.get("reference")

    @property
    def resolver(self) -> SpeciesResolver:
        return self.container.get("resolver")

    @property
    def matcher(self) -> SpeciesMatcher:
        return self.container.get("matcher")

    @property
    def api_client(self) -> FishApiClient:
        return self.container.get("api_client")


def initialize(
    config_service: Optional[ConfigurationService] = None,
    argv: Optional[List[str]] = None,
) -> FishdexContext:
    """Load configuration and the species reference and wire the services.

    The API client is created lazily on first use so scripts that only touch
    the reference never open an HTTP client.

    Args:
        config_service: Ready configuration; loaded from ``argv`` when omitted
        argv: Command-line arguments for the configuration loader

    Raises:
        SpeciesDataError: If the species dataset cannot be read
    """
    if config_service is None:
        config_service, _ = ConfigurationServiceFactory.create_from_args(argv or [])

    configure_logging(config_service.log_level, config_service.log_dir or None)
    logger.info(f"Starting fishdex with {config_service.to_dict()}")

    reference = load_reference(config_service.species_info_path)
    resolver = SpeciesResolver(reference, config_service.common_names)

    container = Container()
    container.register("config", config_service)
    container.register("reference", reference)
    container.register("resolver", resolver)
    container.register_factory("matcher", lambda: SpeciesMatcher(reference))
    container.register_factory(
        "api_client",
        lambda: FishApiClient(config_service.raw_config.detection, resolver),
    )
    return FishdexContext(config=config_service, container=container)
