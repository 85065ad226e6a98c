"""Tests for bond classification and element categories."""

from __future__ import annotations

import pytest

from atomsim.chem_rules import (
    BondType,
    ElementCategory,
    attraction_tier,
    classify_bond,
    element_category,
    expected_bond_distance,
)


@pytest.mark.parametrize(
    "a, b, expected",
    [
        ("H", "O", BondType.POLAR_COVALENT),
        ("Na", "Cl", BondType.IONIC),
        ("Fe", "Cu", BondType.METALLIC),
        ("C", "C", BondType.NONPOLAR_COVALENT),
        ("C", "H", BondType.NONPOLAR_COVALENT),
    ],
)
def test_classify_bond(catalog, a, b, expected) -> None:
    assert classify_bond(catalog[a], catalog[b]) is expected
    assert classify_bond(catalog[b], catalog[a]) is expected


def test_metallic_wins_over_electronegativity_gap(catalog) -> None:
    # Cs (0.79) and Au (2.54) differ by more than 1.7 but both are metals.
    assert classify_bond(catalog["Cs"], catalog["Au"]) is BondType.METALLIC


def test_attraction_tiers() -> None:
    assert attraction_tier(2.23) == 1.5
    assert attraction_tier(1.24) == 1.0
    assert attraction_tier(0.4) == 0.5
    assert attraction_tier(0.0) == 0.5


def test_element_categories(catalog) -> None:
    assert element_category(catalog["Fe"]) is ElementCategory.METAL
    assert element_category(catalog["Si"]) is ElementCategory.SEMIMETAL
    assert element_category(catalog["O"]) is ElementCategory.NONMETAL


def test_expected_bond_distance_is_mean_radius(catalog) -> None:
    assert expected_bond_distance(catalog["H"], catalog["O"]) == pytest.approx(50.5)
