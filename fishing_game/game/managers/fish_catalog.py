import logging
import random
from typing import Dict, Iterable, List, Optional, Tuple
from ...core.models import FishSpecies
from ..exceptions import SpeciesNotFoundException

log = logging.getLogger(__name__)

# (name, base weight, base length) in catalog order; the index is the species id.
DEFAULT_SPECIES = [
    ("Sardine", 0.2, 2.0),
    ("Mackerel", 1.0, 4.0),
    ("Snapper", 5.0, 6.0),
    ("Bass", 8.0, 7.0),
    ("Salmon", 10.0, 5.0),
    ("Grouper", 25.0, 9.0),
    ("Swordfish", 60.0, 14.0),
]


class FishCatalog:
    """Holds the species that can bite and picks one at random for each bite."""

    def __init__(self, species: Optional[Iterable[FishSpecies]] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        if species is None:
            species = [
                FishSpecies(id=i, name=name, base_weight=weight, base_length=length)
                for i, (name, weight, length) in enumerate(DEFAULT_SPECIES)
            ]
        self.species: Dict[int, FishSpecies] = {}
        for fish in species:
            if fish.id in self.species:
                log.warning(f"Duplicate species id {fish.id} ({fish.name}); keeping the later entry.")
            self.species[fish.id] = fish
        # Stats slots are dense (0..n-1) in catalog order, whatever the ids are
        self.slots: Dict[int, int] = {species_id: i for i, species_id in enumerate(self.species)}
        log.info(f"FishCatalog initialized with {len(self.species)} species.")

    def get_random_species(self) -> Tuple[int, FishSpecies]:
        """Uniform pick over the catalog."""
        if not self.species:
            raise SpeciesNotFoundException(-1)
        species_id = self.rng.choice(list(self.species))
        return species_id, self.species[species_id]

    def get_species(self, species_id: int) -> FishSpecies:
        fish = self.species.get(species_id)
        if fish is None:
            raise SpeciesNotFoundException(species_id)
        return fish

    def index_of(self, species_id: int) -> int:
        """Per-species stats slot for a species id."""
        slot = self.slots.get(species_id)
        if slot is None:
            raise SpeciesNotFoundException(species_id)
        return slot

    def get_species_count(self) -> int:
        """Number of species; sizes the per-species stats table."""
        return len(self.species)

    def get_all_species(self) -> List[FishSpecies]:
        return list(self.species.values())
