"""
Experiment controller: free play and guided assembly of a target molecule.

Guided mode draws a random target, biases atoms toward the centre of the
area, and switches the environment regime as the required composition is
gathered. Success is signalled once per target.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import random
from typing import Callable, List, Optional

from atomsim.chem_data import ElementSpec, MoleculeCatalog, TargetMolecule
from atomsim.environment import EnvironmentRegime
from atomsim.molecules import MoleculeRecognizer, RecentBondLog, matches_target
from atomsim.sim import Bounds, Simulation, Vector

logger = logging.getLogger(__name__)

GUIDED_CENTRAL_MULTIPLIER = 5.0
FREE_CENTRAL_MULTIPLIER = 1.0


class ExperimentMode(str, Enum):
    FREE = "free"
    GUIDED = "guided"


class GuidedState(str, Enum):
    SELECTING_TARGET = "selecting_target"
    ASSEMBLING = "assembling"
    COMPOSITION_COMPLETE = "composition_complete"
    MOLECULE_FORMED = "molecule_formed"


@dataclass(frozen=True)
class GuidedStatus:
    composition_complete: bool
    formed: bool


FormedListener = Callable[[TargetMolecule], None]


class ExperimentController:
    """Sole command surface for collaborators driving a `Simulation`."""

    def __init__(
        self,
        simulation: Simulation,
        molecules: MoleculeCatalog,
        *,
        rng: Optional[random.Random] = None,
    ):
        self.simulation = simulation
        self.molecules = molecules
        self.random = rng or random.Random()
        self.mode = ExperimentMode.FREE
        self.state = GuidedState.SELECTING_TARGET
        self.recognizer = MoleculeRecognizer()
        self.bond_log = RecentBondLog()
        self._target: Optional[TargetMolecule] = None
        self._composition_complete = False
        self._formed = False
        self._listeners: List[FormedListener] = []

    # -- collaborator surface ---------------------------------------------

    def on_formed(self, listener: FormedListener) -> None:
        self._listeners.append(listener)

    def current_target(self) -> Optional[TargetMolecule]:
        return self._target

    def status(self) -> GuidedStatus:
        return GuidedStatus(self._composition_complete, self._formed)

    @property
    def molecule_count(self) -> int:
        return self.recognizer.molecule_count

    def set_mode(self, mode: ExperimentMode) -> None:
        self.mode = mode
        if mode is ExperimentMode.GUIDED:
            self.select_target()
        else:
            self._target = None
            self.state = GuidedState.SELECTING_TARGET
            self.simulation.central_multiplier = FREE_CENTRAL_MULTIPLIER
            self.clear()

    def select_target(self, target: Optional[TargetMolecule] = None) -> Optional[TargetMolecule]:
        """Pick a target (random unless given), reset the arena, bias toward the centre."""
        self.mode = ExperimentMode.GUIDED
        self.state = GuidedState.SELECTING_TARGET
        if target is None:
            if not len(self.molecules):
                return None
            target = self.molecules[self.random.randrange(len(self.molecules))]
        self.clear()
        self._target = target
        self.simulation.set_environment(EnvironmentRegime.IDEAL)
        self.simulation.central_multiplier = GUIDED_CENTRAL_MULTIPLIER
        self.state = GuidedState.ASSEMBLING
        logger.info("Guided target: %s (%s)", target.name, target.formula)
        return target

    def advance(self) -> Optional[TargetMolecule]:
        if self.mode is not ExperimentMode.GUIDED:
            return None
        return self.select_target()

    def set_environment(self, regime: EnvironmentRegime) -> None:
        self.simulation.set_environment(regime)
        self.simulation.central_multiplier = (
            GUIDED_CENTRAL_MULTIPLIER if self.mode is ExperimentMode.GUIDED else FREE_CENTRAL_MULTIPLIER
        )

    def clear(self) -> None:
        self.simulation.clear()
        self.recognizer.reset()
        self.bond_log.clear()
        was_complete = self._composition_complete
        self._composition_complete = False
        self._formed = False
        if self._target is not None:
            self.state = GuidedState.ASSEMBLING
            if was_complete:
                self.simulation.set_environment(EnvironmentRegime.IDEAL)

    def is_needed(self, element: ElementSpec) -> bool:
        if self._target is None:
            return False
        present = self.simulation.element_counts()[element.symbol]
        return present < self._target.required(element.symbol)

    def add_atom(
        self,
        element: ElementSpec,
        bounds: Bounds,
        position: Optional[Vector] = None,
    ) -> Optional[int]:
        if self.mode is ExperimentMode.GUIDED and not self.is_needed(element):
            logger.debug("Declined %s: not needed for the current target", element.symbol)
            return None
        return self.simulation.add_atom(element, bounds, position)

    # -- ticking -----------------------------------------------------------

    def step(self, bounds: Bounds) -> None:
        if bounds.is_degenerate:
            return
        guided = self.mode is ExperimentMode.GUIDED and self._target is not None
        if guided and not self._formed:
            self._update_composition()
        self.simulation.step(bounds)
        atoms = self.simulation.atoms
        self.recognizer.update(atoms)
        self.bond_log.update(atoms)
        if guided and self._composition_complete and not self._formed:
            self._check_formed()

    def _update_composition(self) -> None:
        assert self._target is not None
        counts = self.simulation.element_counts()
        complete = all(counts[symbol] >= required for symbol, required in self._target.composition.items())
        if complete and not self._composition_complete:
            self._composition_complete = True
            self.state = GuidedState.COMPOSITION_COMPLETE
            self.simulation.set_environment(EnvironmentRegime.STABLE)
            logger.info("Composition for %s complete", self._target.formula)
        elif not complete and self._composition_complete:
            self._composition_complete = False
            self.state = GuidedState.ASSEMBLING
            self.simulation.set_environment(EnvironmentRegime.IDEAL)

    def _check_formed(self) -> None:
        assert self._target is not None
        if matches_target(self.simulation.atoms, self._target.composition):
            self._formed = True
            self.state = GuidedState.MOLECULE_FORMED
            logger.info("Molecule %s formed", self._target.formula)
            for listener in self._listeners:
                listener(self._target)
