"""Element and target-molecule catalogs used by the simulation."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import yaml

DATA_DIR = Path(__file__).resolve().parent / "data"
PERIODIC_TABLE_PATH = DATA_DIR / "periodic_table.json"
MOLECULES_PATH = DATA_DIR / "molecules.yaml"


@dataclass(frozen=True)
class ElementSpec:
    atomic_number: int
    symbol: str
    name: str
    electronegativity: float
    is_metal: bool
    atomic_radius: float  # pm
    atomic_weight: float
    valences: Tuple[int, ...] = ()

    @property
    def max_valence(self) -> int:
        """Bond capacity; 0 for elements that never bond (e.g. noble gases)."""
        return max(self.valences, default=0)

    @property
    def mass(self) -> float:
        return self.atomic_radius / 100.0

    @property
    def visual_radius(self) -> float:
        return self.atomic_radius / 10.0


@dataclass(frozen=True)
class TargetMolecule:
    name: str
    formula: str
    composition: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "composition", MappingProxyType(dict(self.composition)))

    def __hash__(self) -> int:
        return hash((self.name, self.formula, tuple(sorted(self.composition.items()))))

    def required(self, symbol: str) -> int:
        """Required count for symbol; symbols outside the formula need zero."""
        return self.composition.get(symbol, 0)

    @property
    def atom_total(self) -> int:
        return sum(self.composition.values())


class ElementCatalog:
    """
    Read-only lookup of ElementSpec records keyed by symbol.
    Iteration follows catalog order (atomic number).
    """

    def __init__(self, elements: Iterable[ElementSpec]):
        self._elements: Dict[str, ElementSpec] = {}
        for element in elements:
            self._elements[element.symbol] = element

    def __getitem__(self, symbol: str) -> ElementSpec:
        return self._elements[symbol]

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._elements

    def __iter__(self) -> Iterator[ElementSpec]:
        return iter(self._elements.values())

    def __len__(self) -> int:
        return len(self._elements)

    def get(self, symbol: str) -> Optional[ElementSpec]:
        return self._elements.get(symbol)

    def symbols(self) -> List[str]:
        return list(self._elements)

    def by_weight(self) -> List[ElementSpec]:
        return sorted(self._elements.values(), key=lambda e: e.atomic_weight)


class MoleculeCatalog:
    def __init__(self, molecules: Iterable[TargetMolecule]):
        self._molecules: Tuple[TargetMolecule, ...] = tuple(molecules)

    def __iter__(self) -> Iterator[TargetMolecule]:
        return iter(self._molecules)

    def __len__(self) -> int:
        return len(self._molecules)

    def __getitem__(self, index: int) -> TargetMolecule:
        return self._molecules[index]

    def find(self, key: str) -> Optional[TargetMolecule]:
        """Look a target up by formula or (case-insensitive) name."""
        for molecule in self._molecules:
            if molecule.formula == key or molecule.name.lower() == key.lower():
                return molecule
        return None


def load_element_catalog(path: Path = PERIODIC_TABLE_PATH) -> ElementCatalog:
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    entries = data.get("elements") if isinstance(data, dict) else None
    if not isinstance(entries, list):
        raise ValueError(f"Element catalog {path} must contain an 'elements' list.")
    return ElementCatalog(_element_from_entry(entry, path) for entry in entries)


def _element_from_entry(entry: Dict[str, Any], path: Path) -> ElementSpec:
    try:
        electronegativity = float(entry["electronegativity"])
        if electronegativity < 0:
            raise ValueError(f"Negative electronegativity for {entry['symbol']} in {path}.")
        return ElementSpec(
            atomic_number=int(entry["atomic_number"]),
            symbol=str(entry["symbol"]),
            name=str(entry.get("name", entry["symbol"])),
            electronegativity=electronegativity,
            is_metal=bool(entry["is_metal"]),
            atomic_radius=float(entry["atomic_radius_pm"]),
            atomic_weight=float(entry["atomic_weight"]),
            valences=tuple(int(v) for v in entry.get("valences") or ()),
        )
    except KeyError as exc:
        raise ValueError(f"Element entry in {path} is missing field {exc}.") from exc


def load_molecule_catalog(path: Path = MOLECULES_PATH) -> MoleculeCatalog:
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle)
    if not isinstance(content, dict) or not isinstance(content.get("molecules"), list):
        raise ValueError(f"Molecule catalog {path} must contain a 'molecules' list.")
    molecules: List[TargetMolecule] = []
    for entry in content["molecules"]:
        composition = entry.get("composition")
        if not isinstance(composition, dict) or not composition:
            raise ValueError(f"Molecule {entry.get('name')!r} in {path} needs a composition mapping.")
        molecules.append(
            TargetMolecule(
                name=str(entry["name"]),
                formula=str(entry["formula"]),
                composition={str(k): int(v) for k, v in composition.items()},
            )
        )
    return MoleculeCatalog(molecules)
