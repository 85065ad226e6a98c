"""
Sandbox viewport rendering for the pygame viewer.

The viewport only reads `SimulationSnapshot` objects; simulation space maps
one-to-one onto the viewport rectangle.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

try:
    import pygame
except ImportError:  # pragma: no cover
    pygame = None  # type: ignore

from atomsim.chem_rules import BondType, ElementCategory, element_category

if TYPE_CHECKING:  # pragma: no cover
    from atomsim.sim import AtomState, SimulationSnapshot

Color = Tuple[int, int, int]

SHELL_CAPACITIES = (2, 8, 18, 32, 50, 72)
FIRST_SHELL_RADIUS = 15.0
SHELL_SPACING = 20.0

CATEGORY_COLORS: Dict[ElementCategory, Color] = {
    ElementCategory.METAL: (21, 101, 192),
    ElementCategory.SEMIMETAL: (245, 124, 0),
    ElementCategory.NONMETAL: (198, 40, 40),
}

BOND_COLORS: Dict[BondType, Color] = {
    BondType.METALLIC: (150, 200, 255),
    BondType.IONIC: (255, 180, 80),
    BondType.POLAR_COVALENT: (120, 220, 120),
    BondType.NONPOLAR_COVALENT: (180, 180, 180),
}


def electron_shell_layout(atomic_number: int, rng: random.Random) -> List[Tuple[float, float]]:
    """Cosmetic (radius, angle) pairs for each electron, filling shells in order."""
    layout: List[Tuple[float, float]] = []
    remaining = atomic_number
    radius = FIRST_SHELL_RADIUS
    for capacity in SHELL_CAPACITIES:
        if remaining <= 0:
            break
        in_shell = min(remaining, capacity)
        layout.extend((radius, rng.random() * 2 * math.pi) for _ in range(in_shell))
        remaining -= in_shell
        radius += SHELL_SPACING
    return layout


@dataclass
class ViewportConfig:
    width: int
    height: int
    background_color: Color = (15, 15, 30)
    selection_color: Color = (255, 255, 0)
    electron_color: Color = (200, 255, 120)
    electron_speed: float = 0.05
    orbit_expansion: float = 1.0
    show_electrons: bool = True
    category_colors: Dict[ElementCategory, Color] = field(default_factory=lambda: CATEGORY_COLORS.copy())


class SandboxViewport:
    """
    Draws atoms, bonds and electron shells for a snapshot.
    """

    def __init__(self, rect: "pygame.Rect", config: Optional[ViewportConfig] = None, rng: Optional[random.Random] = None):
        if pygame is None:
            raise RuntimeError("pygame must be installed to use SandboxViewport.")
        self.rect = rect
        self.config = config or ViewportConfig(width=rect.width, height=rect.height)
        self.random = rng or random.Random()
        self.selected_atom_id: Optional[int] = None
        self._electrons: Dict[int, List[Tuple[float, float]]] = {}

    def world_to_screen(self, position: Tuple[float, float]) -> Tuple[int, int]:
        return int(position[0]), int(position[1])

    def atom_at(self, snapshot: "SimulationSnapshot", position_px: Tuple[int, int]) -> Optional[int]:
        best: Optional[int] = None
        best_distance = float("inf")
        for atom in snapshot.atom_states:
            ax, ay = self.world_to_screen(atom.position)
            distance = math.hypot(ax - position_px[0], ay - position_px[1])
            if distance <= max(6.0, atom.element.visual_radius * 1.4) and distance < best_distance:
                best, best_distance = atom.id, distance
        return best

    def advance_electrons(self) -> None:
        speed = self.config.electron_speed
        for atom_id, electrons in self._electrons.items():
            self._electrons[atom_id] = [
                (radius, (angle + speed) % (2 * math.pi)) for radius, angle in electrons
            ]

    def forget_atoms(self) -> None:
        self._electrons.clear()
        self.selected_atom_id = None

    def render(self, surface: "pygame.Surface", snapshot: "SimulationSnapshot") -> None:
        surface.fill(self.config.background_color)
        states = {atom.id: atom for atom in snapshot.atom_states}

        # Bonds first so atoms sit on top.
        for bond in snapshot.bonds:
            atom_i = states.get(bond.atom_i)
            atom_j = states.get(bond.atom_j)
            if atom_i is None or atom_j is None:
                continue
            start = self.world_to_screen(atom_i.position)
            end = self.world_to_screen(atom_j.position)
            color = BOND_COLORS[bond.bond_type]
            if bond.bond_type is BondType.IONIC:
                self._draw_dashed_line(surface, start, end, color)
            else:
                pygame.draw.line(surface, color, start, end, width=2)

        for atom in snapshot.atom_states:
            self._draw_atom(surface, atom)

    def set_selected_atom(self, atom_id: Optional[int]) -> None:
        self.selected_atom_id = atom_id

    def _draw_atom(self, surface: "pygame.Surface", atom: "AtomState") -> None:
        center = self.world_to_screen(atom.position)
        radius = max(3, int(atom.element.visual_radius * 1.4))
        color = self.config.category_colors[element_category(atom.element)]
        pygame.draw.circle(surface, color, center, radius)
        if atom.id == self.selected_atom_id:
            pygame.draw.circle(surface, self.config.selection_color, center, radius + 3, width=2)
        if not self.config.show_electrons:
            return
        electrons = self._electrons.get(atom.id)
        if electrons is None:
            electrons = electron_shell_layout(atom.element.atomic_number, self.random)
            self._electrons[atom.id] = electrons
        for orbit, angle in electrons:
            scaled = orbit * self.config.orbit_expansion
            ex = int(center[0] + math.cos(angle) * scaled)
            ey = int(center[1] + math.sin(angle) * scaled)
            pygame.draw.circle(surface, self.config.electron_color, (ex, ey), 2)

    def _draw_dashed_line(
        self, surface: "pygame.Surface", start: Tuple[int, int], end: Tuple[int, int], color: Color
    ) -> None:
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        length = math.hypot(dx, dy)
        if length == 0:
            return
        dash_length = 8
        gap = 6
        steps = max(1, int(length // (dash_length + gap)))
        ux = dx / length
        uy = dy / length
        cursor = 0.0
        for _ in range(steps):
            dash_start = (int(start[0] + ux * cursor), int(start[1] + uy * cursor))
            dash_end = (
                int(start[0] + ux * (cursor + dash_length)),
                int(start[1] + uy * (cursor + dash_length)),
            )
            pygame.draw.line(surface, color, dash_start, dash_end, width=2)
            cursor += dash_length + gap
