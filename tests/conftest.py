"""
Shared pytest fixtures for AtomSim.

Catalogs are parsed once per session; simulations are built fresh per test
with a seeded random source.
"""

from __future__ import annotations

import pathlib
import random
import sys

import pytest

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from atomsim.chem_data import (  # noqa: E402
    ElementCatalog,
    MoleculeCatalog,
    TargetMolecule,
    load_element_catalog,
    load_molecule_catalog,
)
from atomsim.environment import EnvironmentRegime  # noqa: E402
from atomsim.sim import Bounds, Simulation  # noqa: E402


@pytest.fixture(scope="session")
def project_root() -> pathlib.Path:
    """Return repository root directory."""
    return REPO_ROOT


@pytest.fixture(scope="session")
def catalog() -> ElementCatalog:
    return load_element_catalog()


@pytest.fixture(scope="session")
def molecule_catalog() -> MoleculeCatalog:
    return load_molecule_catalog()


@pytest.fixture(scope="session")
def water() -> TargetMolecule:
    return TargetMolecule(name="Water", formula="H2O", composition={"H": 2, "O": 1})


@pytest.fixture
def bounds() -> Bounds:
    return Bounds(400.0, 400.0)


@pytest.fixture
def simulation() -> Simulation:
    return Simulation(EnvironmentRegime.IDEAL, rng=random.Random(1234))


@pytest.fixture
def water_simulation(simulation: Simulation, catalog: ElementCatalog, bounds: Bounds) -> Simulation:
    """O at the centre with one H either side, all inside bonding range."""
    simulation.add_atom(catalog["O"], bounds, (200.0, 200.0))
    simulation.add_atom(catalog["H"], bounds, (100.0, 200.0))
    simulation.add_atom(catalog["H"], bounds, (300.0, 200.0))
    return simulation
