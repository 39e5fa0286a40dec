"""
Species - The closed set of bird kinds and their static configuration.

Every card in the game is one of these species. Cards are fungible:
only counts matter, so a card is represented by its Species value.

Each species has:
- Total copies in the deck
- Small flock threshold (hand count needed to bank 1)
- Big flock threshold (hand count needed to bank 2)
- Display metadata for presentation adapters
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum


class Species(Enum):
    """Bird species. The value is the display name used on the wire."""
    SPARROW = "Sparrow"
    SWALLOW = "Swallow"
    TIT_WARBLER = "Tit-warbler"
    MANDARIN_DUCK = "Mandarin Duck"
    HOOPOE = "Hoopoe"
    KINGFISHER = "Kingfisher"
    PEACOCK = "Peacock"
    RED_CROWNED_CRANE = "Red-crowned Crane"


@dataclass(frozen=True)
class SpeciesConfig:
    """Static configuration for one species."""
    species: Species
    total: int
    small_flock: int
    big_flock: int

    # Presentation only
    cn_name: str = ""
    emoji: str = ""
    color: str = ""

    @property
    def name(self) -> str:
        return self.species.value


SPECIES_DATA: dict[Species, SpeciesConfig] = {
    Species.SPARROW: SpeciesConfig(
        Species.SPARROW, total=20, small_flock=6, big_flock=9,
        cn_name="麻雀", emoji="🐦", color="beige",
    ),
    Species.SWALLOW: SpeciesConfig(
        Species.SWALLOW, total=20, small_flock=6, big_flock=9,
        cn_name="家燕", emoji="🦅", color="blue",
    ),
    Species.TIT_WARBLER: SpeciesConfig(
        Species.TIT_WARBLER, total=17, small_flock=5, big_flock=7,
        cn_name="花彩雀莺", emoji="🦜", color="purple",
    ),
    Species.MANDARIN_DUCK: SpeciesConfig(
        Species.MANDARIN_DUCK, total=13, small_flock=4, big_flock=6,
        cn_name="鸳鸯", emoji="🦆", color="green",
    ),
    Species.HOOPOE: SpeciesConfig(
        Species.HOOPOE, total=13, small_flock=4, big_flock=6,
        cn_name="戴胜", emoji="🦉", color="yellow",
    ),
    Species.KINGFISHER: SpeciesConfig(
        Species.KINGFISHER, total=10, small_flock=3, big_flock=5,
        cn_name="翠鸟", emoji="🐧", color="cyan",
    ),
    Species.PEACOCK: SpeciesConfig(
        Species.PEACOCK, total=10, small_flock=3, big_flock=5,
        cn_name="孔雀", emoji="🦚", color="orange",
    ),
    Species.RED_CROWNED_CRANE: SpeciesConfig(
        Species.RED_CROWNED_CRANE, total=7, small_flock=2, big_flock=3,
        cn_name="丹顶鹤", emoji="🦩", color="grey",
    ),
}

# Declaration order, used for stable hand sorting and display
ALL_SPECIES: list[Species] = list(Species)
_SPECIES_ORDER = {s: i for i, s in enumerate(ALL_SPECIES)}

TOTAL_CARDS = sum(cfg.total for cfg in SPECIES_DATA.values())


def get_config(species: Species) -> SpeciesConfig:
    """Get the static configuration for a species."""
    return SPECIES_DATA[species]


def parse_species(value: Species | str | None) -> Species | None:
    """
    Resolve a species from an enum, its display name, or its enum name.

    Returns None for anything that is not a known species.
    """
    if isinstance(value, Species):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Species(value)
    except ValueError:
        pass
    key = value.strip().upper().replace("-", "_").replace(" ", "_")
    return Species.__members__.get(key)


def species_sort_key(species: Species) -> int:
    """Sort key placing species in catalogue order."""
    return _SPECIES_ORDER[species]
