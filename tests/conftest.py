"""Shared fixtures: a small species dataset and a loguru capture sink."""
import pytest
from loguru import logger

from species.reference import load_reference
from species.resolver import SpeciesResolver


SPECIES_DATA = {
    "Esox lucius": {
        "name_de": "Hecht",
        "wasser": ["süßwasser"],
        "typ": "raubfisch",
        "schwierigkeit": 3,
        "köder": ["Gummifisch", "Spinner"],
        "tageszeit": ["morgens", "abends"],
        "region": ["deutschland"],
    },
    "Perca fluviatilis": {
        "name_de": "Barsch",
        "wasser": ["süßwasser"],
        "typ": "raubfisch",
        "schwierigkeit": 2,
        "region": ["europa"],
    },
    "Squalius cephalus": {
        "name_de": "Döbel",
        "wasser": ["süßwasser"],
        "typ": "friedfisch",
        "schwierigkeit": 2,
        "region": ["deutschland"],
    },
    "Gadus morhua": {
        "name_de": "Dorsch",
        "wasser": ["salzwasser"],
        "typ": "raubfisch",
        "schwierigkeit": 2,
        "region": ["nordsee", "ostsee"],
    },
    "Anguilla anguilla": {
        "name_de": "Aal",
        "wasser": ["süßwasser", "salzwasser"],
        "schwierigkeit": 4,
    },
    "Thunnus thynnus": {
        "name_de": "Thunfisch",
        "wasser": ["salzwasser"],
        "schwierigkeit": 7,
        "region": "mittelmeer",
    },
    "Salmo trutta": {
        "name_de": "Forelle",
        "wasser": ["süßwasser", "salzwasser"],
        "schwierigkeit": 3,
        "region": ["deutschland"],
    },
    "Coregonus lavaretus": {
        "wasser": ["süßwasser"],
        "schwierigkeit": 3,
    },
    "Silurus glanis": {
        "name_de": "Wels",
        "schwierigkeit": "hoch",
    },
}


@pytest.fixture
def species_data():
    return {name: dict(info) for name, info in SPECIES_DATA.items()}


@pytest.fixture
def reference(species_data):
    return load_reference(species_data)


@pytest.fixture
def resolver(reference):
    return SpeciesResolver(reference)


@pytest.fixture
def log_messages():
    """Collect loguru output as ``LEVEL|message`` strings."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(str(m).rstrip("\n")), level="DEBUG", format="{level}|{message}")
    yield messages
    logger.remove(handler_id)
