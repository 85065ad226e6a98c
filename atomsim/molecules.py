"""
Connected-component analysis over the bond graph.

Components are recomputed from scratch on every call; nothing is cached
between ticks.
"""

from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Mapping, Optional, Sequence

from atomsim.chem_rules import classify_bond
from atomsim.sim import Atom


def find_components(atoms: Sequence[Atom]) -> List[List[Atom]]:
    """Breadth-first labelling starting from each unvisited atom in arena order."""
    by_id: Dict[int, Atom] = {atom.id: atom for atom in atoms}
    visited = set()
    components: List[List[Atom]] = []
    for start in atoms:
        if start.id in visited:
            continue
        visited.add(start.id)
        component: List[Atom] = []
        queue: Deque[Atom] = deque([start])
        while queue:
            current = queue.popleft()
            component.append(current)
            for neighbor_id in sorted(current.bonded_ids):
                if neighbor_id not in visited and neighbor_id in by_id:
                    visited.add(neighbor_id)
                    queue.append(by_id[neighbor_id])
        components.append(component)
    return components


def count_molecules(atoms: Sequence[Atom]) -> int:
    """Components with more than one atom; singletons are not molecules."""
    return sum(1 for component in find_components(atoms) if len(component) > 1)


def composition_of(component: Sequence[Atom]) -> Counter:
    return Counter(atom.element.symbol for atom in component)


def matches_target(atoms: Sequence[Atom], composition: Mapping[str, int]) -> bool:
    """True when one component spans the whole arena with exactly `composition`."""
    if not atoms:
        return False
    expected = {symbol: count for symbol, count in composition.items() if count > 0}
    for component in find_components(atoms):
        if len(component) == len(atoms):
            return dict(composition_of(component)) == expected
    return False


@dataclass
class MoleculeRecognizer:
    components: List[List[Atom]] = field(default_factory=list)
    molecule_count: int = 0

    def update(self, atoms: Sequence[Atom]) -> int:
        self.components = find_components(atoms)
        self.molecule_count = sum(1 for c in self.components if len(c) > 1)
        return self.molecule_count

    @property
    def molecules(self) -> List[List[Atom]]:
        return [c for c in self.components if len(c) > 1]

    def reset(self) -> None:
        self.components = []
        self.molecule_count = 0


class RecentBondLog:
    """
    Keeps the most recent distinct element-pair bonds seen, e.g.
    ``"H-O (polar covalent)"``, dropping the oldest past `limit`.
    """

    def __init__(self, limit: int = 2):
        self.limit = limit
        self._pairs: Deque[str] = deque()
        self._entries: Deque[str] = deque()

    def update(self, atoms: Sequence[Atom]) -> None:
        by_id = {atom.id: atom for atom in atoms}
        for atom in atoms:
            for other_id in sorted(atom.bonded_ids):
                other = by_id.get(other_id)
                if other is None:
                    continue
                pair = "-".join(sorted((atom.element.symbol, other.element.symbol)))
                if pair in self._pairs:
                    continue
                bond_type = classify_bond(atom.element, other.element)
                self._pairs.append(pair)
                self._entries.append(f"{atom.element.symbol}-{other.element.symbol} ({bond_type.value})")
                if len(self._entries) > self.limit:
                    self._pairs.popleft()
                    self._entries.popleft()

    @property
    def entries(self) -> List[str]:
        return list(self._entries)

    def latest(self) -> Optional[str]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._pairs.clear()
        self._entries.clear()
