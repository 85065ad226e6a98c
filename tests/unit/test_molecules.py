"""Tests for connected-component recognition over the bond graph."""

from __future__ import annotations

from atomsim.molecules import (
    MoleculeRecognizer,
    RecentBondLog,
    composition_of,
    count_molecules,
    find_components,
    matches_target,
)


def test_unbonded_atoms_are_not_molecules(simulation, catalog, bounds) -> None:
    for x in (50.0, 150.0, 250.0, 350.0):
        simulation.add_atom(catalog["Ne"], bounds, (x, 200.0))
    assert count_molecules(simulation.atoms) == 0
    assert len(find_components(simulation.atoms)) == 4


def test_components_follow_bonds(simulation, catalog, bounds) -> None:
    ids = [simulation.add_atom(catalog[s], bounds, (10.0 * i, 10.0)) for i, s in enumerate(["H", "H", "O", "Cl"])]
    atoms = {atom.id: atom for atom in simulation.atoms}
    simulation._link(atoms[ids[0]], atoms[ids[2]])  # type: ignore[attr-defined]
    simulation._link(atoms[ids[1]], atoms[ids[2]])  # type: ignore[attr-defined]

    components = find_components(simulation.atoms)
    assert [[a.id for a in c] for c in components] == [[0, 2, 1], [3]]
    assert count_molecules(simulation.atoms) == 1
    assert composition_of(components[0]) == {"H": 2, "O": 1}


def test_matches_target_requires_whole_arena(water_simulation, catalog, bounds) -> None:
    water = {"H": 2, "O": 1}
    assert not matches_target(water_simulation.atoms, water)
    water_simulation.step(bounds)
    assert matches_target(water_simulation.atoms, water)
    assert not matches_target(water_simulation.atoms, {"H": 2, "O": 2})
    assert not matches_target(water_simulation.atoms, {"H": 2})

    water_simulation.add_atom(catalog["Ne"], bounds, (20.0, 20.0))
    assert not matches_target(water_simulation.atoms, water)


def test_matches_target_on_empty_arena() -> None:
    assert not matches_target([], {"H": 2, "O": 1})


def test_recognizer_recomputes_each_update(water_simulation, bounds) -> None:
    recognizer = MoleculeRecognizer()
    assert recognizer.update(water_simulation.atoms) == 0
    water_simulation.step(bounds)
    assert recognizer.update(water_simulation.atoms) == 1
    assert len(recognizer.molecules[0]) == 3
    water_simulation.clear()
    assert recognizer.update(water_simulation.atoms) == 0


def test_recent_bond_log_keeps_latest_pairs(simulation, catalog, bounds) -> None:
    log = RecentBondLog(limit=2)
    atoms = [simulation.get_atom(simulation.add_atom(catalog[s], bounds, (0.0, 0.0))) for s in ("O", "H", "C", "Na", "Cl")]
    simulation._link(atoms[0], atoms[1])  # type: ignore[attr-defined]
    log.update(simulation.atoms)
    assert log.entries == ["O-H (polar covalent)"]

    simulation._link(atoms[2], atoms[0])  # type: ignore[attr-defined]
    simulation._link(atoms[3], atoms[4])  # type: ignore[attr-defined]
    log.update(simulation.atoms)
    assert len(log.entries) == 2
    assert log.latest() == "Na-Cl (ionic)"

    log.clear()
    assert log.entries == [] and log.latest() is None
