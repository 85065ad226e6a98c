"""
Sanity checks for the bundled element and molecule catalogs.
"""

from __future__ import annotations

import json

import pytest

from atomsim.chem_data import TargetMolecule, load_element_catalog, load_molecule_catalog


def test_periodic_table_contains_all_elements(catalog) -> None:
    assert len(catalog) == 118
    assert [e.atomic_number for e in catalog] == list(range(1, 119))


def test_element_numerical_fields(catalog) -> None:
    hydrogen = catalog["H"]
    assert hydrogen.electronegativity == pytest.approx(2.20)
    assert hydrogen.atomic_radius == pytest.approx(53.0)
    assert hydrogen.mass == pytest.approx(0.53)
    assert hydrogen.max_valence == 1
    assert all(e.electronegativity >= 0 for e in catalog)


def test_noble_gases_cannot_bond(catalog) -> None:
    for symbol in ("He", "Ne", "Ar", "Kr", "Xe", "Rn", "Og"):
        assert catalog[symbol].max_valence == 0


def test_catalog_lookup(catalog) -> None:
    assert catalog.get("Zz") is None
    with pytest.raises(KeyError):
        catalog["Zz"]
    assert catalog.by_weight()[0].symbol == "H"


def test_molecule_compositions_reference_known_elements(catalog, molecule_catalog) -> None:
    assert len(molecule_catalog) > 30
    for molecule in molecule_catalog:
        for symbol, count in molecule.composition.items():
            assert symbol in catalog, f"{molecule.formula} uses unknown {symbol}"
            assert count > 0


def test_molecule_find_by_formula_or_name(molecule_catalog) -> None:
    assert molecule_catalog.find("H2O").name == "Water"
    assert molecule_catalog.find("water").formula == "H2O"
    assert molecule_catalog.find("XYZ") is None


def test_target_composition_is_read_only(water) -> None:
    assert water.required("H") == 2
    assert water.required("C") == 0
    assert water.atom_total == 3
    with pytest.raises(TypeError):
        water.composition["H"] = 5  # type: ignore[index]


def test_malformed_catalogs_raise(tmp_path) -> None:
    bad_json = tmp_path / "table.json"
    bad_json.write_text(json.dumps({"elements": [{"symbol": "H"}]}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_element_catalog(bad_json)

    bad_yaml = tmp_path / "molecules.yaml"
    bad_yaml.write_text("molecules:\n  - {name: Nothing, formula: X}\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_molecule_catalog(bad_yaml)


def test_target_molecule_equality_by_value() -> None:
    a = TargetMolecule("Water", "H2O", {"H": 2, "O": 1})
    assert a.composition == {"H": 2, "O": 1}


def test_targets_are_hashable(water, molecule_catalog) -> None:
    same = TargetMolecule("Water", "H2O", {"O": 1, "H": 2})
    assert hash(same) == hash(TargetMolecule("Water", "H2O", {"H": 2, "O": 1}))
    assert len({same, TargetMolecule("Water", "H2O", {"H": 2, "O": 1})}) == 1
    assert len(set(molecule_catalog)) == len(molecule_catalog)
    assert {water: "done"}[water] == "done"
