"""Environment regimes: named bundles of force-model constants."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class EnvironmentConstants:
    attraction_scale: float
    repulsion_scale: float
    damping_factor: float
    bond_threshold: float
    central_attraction_factor: float
    bond_break_factor: float

    def with_overrides(self, overrides: Mapping[str, Any]) -> "EnvironmentConstants":
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown environment constants: {sorted(unknown)}")
        return replace(self, **{key: float(value) for key, value in overrides.items()})


class EnvironmentRegime(str, Enum):
    IDEAL = "ideal"
    REAL = "real"
    STABLE = "stable"

    @property
    def constants(self) -> EnvironmentConstants:
        return REGIME_CONSTANTS[self]


REGIME_CONSTANTS: Dict[EnvironmentRegime, EnvironmentConstants] = {
    EnvironmentRegime.IDEAL: EnvironmentConstants(
        attraction_scale=0.001,
        repulsion_scale=50.0,
        damping_factor=0.9,
        bond_threshold=150.0,
        central_attraction_factor=0.00001,
        bond_break_factor=2.5,
    ),
    EnvironmentRegime.REAL: EnvironmentConstants(
        attraction_scale=0.001,
        repulsion_scale=50.0,
        damping_factor=0.9,
        bond_threshold=100.0,
        central_attraction_factor=0.00001,
        bond_break_factor=1.5,
    ),
    # Stronger attraction, weaker repulsion and a wide break tolerance so an
    # assembled composition settles into its bonded shape.
    EnvironmentRegime.STABLE: EnvironmentConstants(
        attraction_scale=0.005,
        repulsion_scale=20.0,
        damping_factor=0.95,
        bond_threshold=200.0,
        central_attraction_factor=0.0001,
        bond_break_factor=4.0,
    ),
}


def parse_regime(value: str) -> EnvironmentRegime:
    try:
        return EnvironmentRegime(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(r.value for r in EnvironmentRegime)
        raise ValueError(f"Unknown environment regime '{value}' (expected one of {choices}).") from exc
