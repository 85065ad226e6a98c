"""
Utilities for loading AtomSim scenarios from YAML configuration files.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import random
from typing import Any, Dict, Iterable, List, Optional, Tuple

import yaml

from atomsim.chem_data import (
    ElementCatalog,
    MoleculeCatalog,
    load_element_catalog,
    load_molecule_catalog,
)
from atomsim.environment import parse_regime
from atomsim.guided import ExperimentController, ExperimentMode
from atomsim.sim import Bounds, EnvironmentLike, Simulation, Vector

DEFAULT_BOUNDS = Bounds(800.0, 600.0)


@dataclass
class SimulationBundle:
    """Container returned by configuration loader."""

    simulation: Simulation
    controller: ExperimentController
    bounds: Bounds
    metadata: Dict[str, Any]


def load_simulation_from_yaml(
    path: Path,
    *,
    catalog: Optional[ElementCatalog] = None,
    molecules: Optional[MoleculeCatalog] = None,
) -> SimulationBundle:
    """Load a Simulation, its controller and metadata from a YAML scenario."""
    data = _load_yaml(path)
    if catalog is None:
        catalog = load_element_catalog()
    if molecules is None:
        molecules = load_molecule_catalog()
    settings = data.get("simulation", {}) or {}

    bounds = _build_bounds(settings.get("bounds"))
    seed = settings.get("seed")
    rng = random.Random(seed)
    simulation = Simulation(
        _build_environment(settings),
        rng=rng,
        central_multiplier=float(settings.get("central_multiplier", 1.0)),
    )
    controller = ExperimentController(simulation, molecules, rng=rng)

    mode = ExperimentMode(str(settings.get("mode", "free")).lower())
    if mode is ExperimentMode.GUIDED:
        target_key = settings.get("target")
        target = molecules.find(str(target_key)) if target_key is not None else None
        if target_key is not None and target is None:
            raise ValueError(f"Unknown target molecule '{target_key}' in {path}.")
        controller.select_target(target)

    for symbol, position in _build_placements((data.get("system") or {}).get("atoms") or [], catalog, path):
        controller.add_atom(catalog[symbol], bounds, position)

    return SimulationBundle(
        simulation=simulation,
        controller=controller,
        bounds=bounds,
        metadata=data.get("metadata", {}) or {},
    )


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        content = yaml.safe_load(handle)
    if not isinstance(content, dict):
        raise ValueError(f"YAML file {path} must contain a mapping at the root.")
    return content


def _build_bounds(value: Any) -> Bounds:
    if value is None:
        return DEFAULT_BOUNDS
    width, height = _tuple2(value, "bounds")
    return Bounds(width, height)


def _build_environment(config: Dict[str, Any]) -> EnvironmentLike:
    regime = parse_regime(str(config.get("environment", "ideal")))
    overrides = config.get("overrides") or {}
    if not overrides:
        return regime
    if not isinstance(overrides, dict):
        raise ValueError("simulation.overrides must be a mapping of constant names to numbers.")
    return regime.constants.with_overrides(overrides)


def _build_placements(
    atom_list: List[Dict[str, Any]], catalog: ElementCatalog, path: Path
) -> List[Tuple[str, Optional[Vector]]]:
    placements: List[Tuple[str, Optional[Vector]]] = []
    for atom in atom_list:
        symbol = str(atom.get("element", ""))
        if symbol not in catalog:
            raise ValueError(f"Unknown element '{symbol}' in {path}.")
        position = atom.get("position")
        count = int(atom.get("count", 1))
        for _ in range(count):
            placements.append((symbol, _tuple2(position, "position") if position is not None else None))
    return placements


def _tuple2(value: Any, name: str) -> Tuple[float, float]:
    if not isinstance(value, Iterable) or isinstance(value, (str, bytes)):
        raise ValueError(f"{name} must be a list of 2 numbers.")
    values = list(value)
    if len(values) != 2:
        raise ValueError(f"{name} must contain exactly 2 entries.")
    return float(values[0]), float(values[1])
