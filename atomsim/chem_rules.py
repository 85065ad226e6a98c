"""Chemistry rules: bond classification and element categories."""

from __future__ import annotations

from enum import Enum

from atomsim.chem_data import ElementSpec

IONIC_DELTA_EN = 1.7
POLAR_DELTA_EN = 0.4

SEMIMETAL_SYMBOLS = frozenset({"B", "Si", "Ge", "As", "Sb", "Te", "Po", "At"})


class BondType(str, Enum):
    METALLIC = "metallic"
    IONIC = "ionic"
    POLAR_COVALENT = "polar covalent"
    NONPOLAR_COVALENT = "nonpolar covalent"


class ElementCategory(str, Enum):
    METAL = "metal"
    SEMIMETAL = "semimetal"
    NONMETAL = "nonmetal"


def electronegativity_delta(a: ElementSpec, b: ElementSpec) -> float:
    return abs(a.electronegativity - b.electronegativity)


def classify_bond(a: ElementSpec, b: ElementSpec) -> BondType:
    if a.is_metal and b.is_metal:
        return BondType.METALLIC
    delta = electronegativity_delta(a, b)
    if delta > IONIC_DELTA_EN:
        return BondType.IONIC
    if delta > POLAR_DELTA_EN:
        return BondType.POLAR_COVALENT
    return BondType.NONPOLAR_COVALENT


def attraction_tier(delta_en: float) -> float:
    """Attraction multiplier used by the pairwise force law."""
    if delta_en > IONIC_DELTA_EN:
        return 1.5
    if delta_en > POLAR_DELTA_EN:
        return 1.0
    return 0.5


def element_category(element: ElementSpec) -> ElementCategory:
    if element.is_metal:
        return ElementCategory.METAL
    if element.symbol in SEMIMETAL_SYMBOLS:
        return ElementCategory.SEMIMETAL
    return ElementCategory.NONMETAL


def expected_bond_distance(a: ElementSpec, b: ElementSpec) -> float:
    return (a.atomic_radius + b.atomic_radius) * 0.5
