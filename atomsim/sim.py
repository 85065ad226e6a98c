"""
2D atom-interaction engine for AtomSim.

Conventions:
    - Positions and distances: simulation-area units (pixels in the viewer);
      atomic radii in pm are used directly as distances.
    - Time: one call to `Simulation.step` is one tick; velocities are
      displacement per tick.
    - Mass: atomic radius / 100.

Each tick runs to completion in a fixed order: forces are computed from the
positions at the start of the tick, every atom is integrated and bounced off
the walls, over-stretched bonds are broken, and finally new bonds are formed.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import logging
import math
import random
from typing import Dict, FrozenSet, List, Optional, Set, Tuple, Union

from atomsim.chem_data import ElementSpec
from atomsim.chem_rules import (
    BondType,
    attraction_tier,
    classify_bond,
    electronegativity_delta,
    expected_bond_distance,
)
from atomsim.environment import EnvironmentConstants, EnvironmentRegime

logger = logging.getLogger(__name__)

Vector = Tuple[float, float]

OVERLAP_REPULSION_MULTIPLIER = 2.0


def vector_add(a: Vector, b: Vector) -> Vector:
    return (a[0] + b[0], a[1] + b[1])


def vector_sub(a: Vector, b: Vector) -> Vector:
    return (a[0] - b[0], a[1] - b[1])


def vector_scale(v: Vector, scalar: float) -> Vector:
    return (v[0] * scalar, v[1] * scalar)


def vector_length(v: Vector) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1])


def vector_zero() -> Vector:
    return (0.0, 0.0)


@dataclass(frozen=True)
class Bounds:
    width: float
    height: float

    @property
    def is_degenerate(self) -> bool:
        return self.width <= 0 or self.height <= 0

    @property
    def center(self) -> Vector:
        return (self.width / 2.0, self.height / 2.0)


@dataclass
class Atom:
    id: int
    element: ElementSpec
    position: Vector
    velocity: Vector = field(default_factory=vector_zero)
    mass: float = 1.0
    bonded_ids: Set[int] = field(default_factory=set)
    bond_count: int = 0

    @property
    def capacity(self) -> int:
        return self.element.max_valence

    @property
    def has_free_valence(self) -> bool:
        return self.bond_count < self.element.max_valence


@dataclass(frozen=True)
class AtomState:
    id: int
    symbol: str
    element: ElementSpec
    position: Vector
    velocity: Vector
    bonded_ids: FrozenSet[int]
    bond_count: int


@dataclass(frozen=True)
class BondState:
    atom_i: int
    atom_j: int
    bond_type: BondType


@dataclass(frozen=True)
class SimulationSnapshot:
    step_index: int
    regime: Optional[EnvironmentRegime]
    atom_states: Tuple[AtomState, ...]
    bonds: Tuple[BondState, ...] = ()


class BondInvariantError(AssertionError):
    """Raised by `Simulation.check_invariants` when bond bookkeeping is corrupt."""


EnvironmentLike = Union[EnvironmentRegime, EnvironmentConstants]


class Simulation:
    """
    Owns the atom arena and advances it one tick at a time.

    Mutating calls (`add_atom`, `clear`, `set_environment`) must be made
    between ticks, never from inside `step`.
    """

    def __init__(
        self,
        environment: EnvironmentLike = EnvironmentRegime.IDEAL,
        *,
        rng: Optional[random.Random] = None,
        central_multiplier: float = 1.0,
    ):
        self.random = rng or random.Random()
        self.central_multiplier = central_multiplier
        self.regime: Optional[EnvironmentRegime] = None
        self.constants: EnvironmentConstants = EnvironmentRegime.IDEAL.constants
        self.set_environment(environment)
        self._atoms: List[Atom] = []
        self._by_id: Dict[int, Atom] = {}
        self._next_id = 0
        self.current_step = 0

    # -- arena -------------------------------------------------------------

    @property
    def atoms(self) -> Tuple[Atom, ...]:
        """Atoms in arena order. Treat as read-only; valid until the next step."""
        return tuple(self._atoms)

    def __len__(self) -> int:
        return len(self._atoms)

    def get_atom(self, atom_id: int) -> Optional[Atom]:
        return self._by_id.get(atom_id)

    def add_atom(
        self,
        element: ElementSpec,
        bounds: Bounds,
        position: Optional[Vector] = None,
    ) -> Optional[int]:
        """Append a new atom; returns its id, or None when bounds are degenerate."""
        if bounds.is_degenerate:
            return None
        if position is None:
            position = (
                self.random.random() * bounds.width,
                self.random.random() * bounds.height,
            )
        atom = Atom(
            id=self._next_id,
            element=element,
            position=(float(position[0]), float(position[1])),
            mass=element.mass,
        )
        self._next_id += 1
        self._atoms.append(atom)
        self._by_id[atom.id] = atom
        logger.debug("Added %s as atom %d at (%.1f, %.1f)", element.symbol, atom.id, *atom.position)
        return atom.id

    def clear(self) -> None:
        self._atoms.clear()
        self._by_id.clear()
        self._next_id = 0
        self.current_step = 0

    def element_counts(self) -> Counter:
        return Counter(atom.element.symbol for atom in self._atoms)

    def set_environment(self, environment: EnvironmentLike) -> None:
        """Swap the active constants; atom state is left untouched."""
        if isinstance(environment, EnvironmentRegime):
            self.regime = environment
            self.constants = environment.constants
        else:
            self.regime = None
            self.constants = environment
        logger.info("Environment set to %s", self.regime.value if self.regime else "custom")

    # -- stepping ----------------------------------------------------------

    def step(self, bounds: Bounds) -> None:
        if bounds.is_degenerate:
            return
        forces = self._compute_forces(bounds)
        self._integrate(forces, bounds)
        self._break_bonds()
        self._form_bonds()
        self.current_step += 1

    def _compute_forces(self, bounds: Bounds) -> List[Vector]:
        constants = self.constants
        center = bounds.center
        forces: List[Vector] = []
        for atom in self._atoms:
            to_center = vector_sub(center, atom.position)
            center_distance = vector_length(to_center)
            total = vector_scale(
                to_center,
                center_distance * constants.central_attraction_factor * self.central_multiplier,
            )

            for other in self._atoms:
                if other is atom:
                    continue
                delta = vector_sub(other.position, atom.position)
                distance = vector_length(delta)
                if distance == 0.0:
                    continue

                repulsion = constants.repulsion_scale / (distance * distance)
                delta_en = electronegativity_delta(atom.element, other.element)
                attraction = constants.attraction_scale * attraction_tier(delta_en)
                if distance < expected_bond_distance(atom.element, other.element):
                    repulsion *= OVERLAP_REPULSION_MULTIPLIER
                    attraction = 0.0

                # Raw displacement, not a unit vector: magnitude grows with distance.
                total = vector_add(total, vector_scale(delta, attraction - repulsion))
            forces.append(total)
        return forces

    def _integrate(self, forces: List[Vector], bounds: Bounds) -> None:
        damping = self.constants.damping_factor
        for atom, force in zip(self._atoms, forces):
            velocity = vector_add(atom.velocity, vector_scale(force, 1.0 / atom.mass))
            atom.velocity = vector_scale(velocity, damping)
            atom.position = vector_add(atom.position, atom.velocity)
            self._reflect(atom, bounds)

    def _reflect(self, atom: Atom, bounds: Bounds) -> None:
        radius = atom.element.visual_radius
        x, y = atom.position
        vx, vy = atom.velocity
        if x < radius:
            x, vx = radius, -vx
        elif x > bounds.width - radius:
            x, vx = bounds.width - radius, -vx
        if y < radius:
            y, vy = radius, -vy
        elif y > bounds.height - radius:
            y, vy = bounds.height - radius, -vy
        atom.position = (x, y)
        atom.velocity = (vx, vy)

    def _break_bonds(self) -> None:
        """Remove every bond stretched past its break threshold, from one snapshot."""
        to_break: Set[Tuple[int, int]] = set()
        for atom in self._atoms:
            for other_id in atom.bonded_ids:
                pair = (min(atom.id, other_id), max(atom.id, other_id))
                if pair in to_break:
                    continue
                other = self._by_id[other_id]
                distance = vector_length(vector_sub(other.position, atom.position))
                threshold = (
                    expected_bond_distance(atom.element, other.element)
                    * self.constants.bond_break_factor
                )
                if distance > threshold:
                    to_break.add(pair)

        for id_a, id_b in sorted(to_break):
            self._unlink(self._by_id[id_a], self._by_id[id_b])
            logger.debug("Bond %d-%d broke", id_a, id_b)

    def _form_bonds(self) -> None:
        """First-match-wins bond formation in arena order, committed immediately."""
        bond_threshold = self.constants.bond_threshold
        for atom in self._atoms:
            if not atom.has_free_valence:
                continue
            for other in self._atoms:
                if not atom.has_free_valence:
                    break
                if other is atom or other.id in atom.bonded_ids or not other.has_free_valence:
                    continue
                delta = vector_sub(other.position, atom.position)
                distance = vector_length(delta)
                if distance == 0.0:
                    continue
                expected = expected_bond_distance(atom.element, other.element)
                if distance < expected + bond_threshold:
                    self._link(atom, other)
                    atom.velocity = vector_zero()
                    other.velocity = vector_zero()
                    angle = math.atan2(delta[1], delta[0])
                    other.position = (
                        atom.position[0] + math.cos(angle) * expected,
                        atom.position[1] + math.sin(angle) * expected,
                    )
                    logger.debug(
                        "Bond %d-%d formed (%s-%s)",
                        atom.id,
                        other.id,
                        atom.element.symbol,
                        other.element.symbol,
                    )

    def _link(self, a: Atom, b: Atom) -> None:
        a.bonded_ids.add(b.id)
        b.bonded_ids.add(a.id)
        a.bond_count = len(a.bonded_ids)
        b.bond_count = len(b.bonded_ids)

    def _unlink(self, a: Atom, b: Atom) -> None:
        a.bonded_ids.discard(b.id)
        b.bonded_ids.discard(a.id)
        a.bond_count = len(a.bonded_ids)
        b.bond_count = len(b.bonded_ids)

    # -- queries -----------------------------------------------------------

    def bond_pairs(self) -> List[Tuple[int, int]]:
        pairs: List[Tuple[int, int]] = []
        for atom in self._atoms:
            pairs.extend((atom.id, other_id) for other_id in sorted(atom.bonded_ids) if atom.id < other_id)
        return pairs

    def bond_exists(self, atom_i: int, atom_j: int) -> bool:
        atom = self._by_id.get(atom_i)
        return atom is not None and atom_j in atom.bonded_ids

    def snapshot(self) -> SimulationSnapshot:
        atom_states = tuple(
            AtomState(
                id=atom.id,
                symbol=atom.element.symbol,
                element=atom.element,
                position=atom.position,
                velocity=atom.velocity,
                bonded_ids=frozenset(atom.bonded_ids),
                bond_count=atom.bond_count,
            )
            for atom in self._atoms
        )
        bonds = tuple(
            BondState(i, j, classify_bond(self._by_id[i].element, self._by_id[j].element))
            for i, j in self.bond_pairs()
        )
        return SimulationSnapshot(
            step_index=self.current_step,
            regime=self.regime,
            atom_states=atom_states,
            bonds=bonds,
        )

    def check_invariants(self) -> None:
        """Verify bond symmetry and capacity bookkeeping for every atom."""
        for atom in self._atoms:
            if atom.bond_count != len(atom.bonded_ids):
                raise BondInvariantError(f"Atom {atom.id} bond_count {atom.bond_count} != {len(atom.bonded_ids)}")
            if atom.bond_count > atom.capacity:
                raise BondInvariantError(f"Atom {atom.id} exceeds capacity {atom.capacity}")
            for other_id in atom.bonded_ids:
                other = self._by_id.get(other_id)
                if other is None or atom.id not in other.bonded_ids:
                    raise BondInvariantError(f"Bond {atom.id}->{other_id} is not symmetric")
