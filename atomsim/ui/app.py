"""
pygame viewer for AtomSim.

Keys:
    1-9     add the element bound to that key (the guided target's elements first,
            then H, C, N, O, Na, Cl, Fe, Cu, He)
    [ ]     pick the previous / next element from the whole periodic table
    A       add the picked element
    C       clear the arena
    E       cycle the environment regime
    G       toggle free / guided mode
    N       next guided target
    SPACE   pause / resume
    .       single step while paused
    click   select an atom and show its element details
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Iterable, List, Optional, Tuple

try:
    import pygame
except ImportError:  # pragma: no cover
    pygame = None  # type: ignore

from atomsim.chem_data import ElementCatalog, TargetMolecule
from atomsim.environment import EnvironmentRegime
from atomsim.guided import ExperimentController, ExperimentMode
from atomsim.sim import Atom, Bounds, SimulationSnapshot
from .controllers import SimulationController
from .viewport import SandboxViewport, ViewportConfig

logger = logging.getLogger(__name__)

DEFAULT_HOTKEY_SYMBOLS = ["H", "C", "N", "O", "Na", "Cl", "Fe", "Cu", "He"]

REGIME_ELECTRON_STYLE = {
    EnvironmentRegime.IDEAL: (0.05, 1.0),
    EnvironmentRegime.REAL: (0.15, 1.5),
    EnvironmentRegime.STABLE: (0.05, 1.0),
}


def hotkey_palette(
    defaults: Iterable[str],
    target: Optional[TargetMolecule],
    catalog: ElementCatalog,
    size: int = 9,
) -> List[str]:
    """Symbols bound to the number keys: target elements first, then the defaults."""
    symbols = list(target.composition) if target is not None else []
    palette: List[str] = []
    for symbol in symbols + list(defaults):
        if symbol in catalog and symbol not in palette:
            palette.append(symbol)
    return palette[:size]


def electron_style(regime: Optional[EnvironmentRegime]) -> Tuple[float, float]:
    """Electron (speed, orbit expansion) drawn for a regime; custom constants look ideal."""
    return REGIME_ELECTRON_STYLE[regime or EnvironmentRegime.IDEAL]


@dataclass
class AppConfig:
    width: int = 1024
    height: int = 720
    title: str = "AtomSim"
    target_fps: int = 60
    status_height: int = 140
    hotkey_symbols: List[str] = field(default_factory=lambda: list(DEFAULT_HOTKEY_SYMBOLS))


@dataclass
class AppState:
    running: bool = True
    success_message: Optional[str] = None
    clock: Optional["pygame.time.Clock"] = field(default=None, repr=False)


class AtomSimApp:
    """
    High-level pygame application: routes key presses to queued commands,
    drives ticks through `SimulationController` and draws snapshots.
    """

    def __init__(
        self,
        controller: ExperimentController,
        catalog: ElementCatalog,
        config: Optional[AppConfig] = None,
    ):
        if pygame is None:
            raise RuntimeError("pygame is not installed. Install the 'ui' extra to run the viewer.")
        self.config = config or AppConfig()
        self.state = AppState()
        self.catalog = catalog
        self.controller = controller
        bounds = Bounds(self.config.width, self.config.height - self.config.status_height)
        self.sim_controller = SimulationController(controller, bounds)
        self.screen: Optional["pygame.Surface"] = None
        self.viewport: Optional[SandboxViewport] = None
        self.font: Optional["pygame.font.Font"] = None
        self._hotkeys: Dict[int, str] = {}
        self._element_order = [element.symbol for element in catalog.by_weight()]
        self._picked_index = 0
        self._latest_snapshot: Optional[SimulationSnapshot] = None
        controller.on_formed(self._on_formed)

    def setup(self) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode((self.config.width, self.config.height))
        pygame.display.set_caption(self.config.title)
        self.state.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Helvetica", 16)
        bounds = self.sim_controller.bounds
        rect = pygame.Rect(0, 0, int(bounds.width), int(bounds.height))
        self.viewport = SandboxViewport(rect, ViewportConfig(width=rect.width, height=rect.height))
        self._bind_hotkeys()
        self._apply_electron_style()
        self._latest_snapshot = self.sim_controller.snapshot()

    def handle_event(self, event: "pygame.event.Event") -> None:
        if event.type == pygame.QUIT:
            self.state.running = False
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self._select_at(event.pos)
            return
        if event.type != pygame.KEYDOWN:
            return
        if event.key in self._hotkeys:
            symbol = self._hotkeys[event.key]
            self.sim_controller.submit(lambda: self._add_element(symbol))
        elif event.key == pygame.K_LEFTBRACKET:
            self._pick_element(-1)
        elif event.key == pygame.K_RIGHTBRACKET:
            self._pick_element(1)
        elif event.key == pygame.K_a and self.picked_symbol is not None:
            symbol = self.picked_symbol
            self.sim_controller.submit(lambda: self._add_element(symbol))
        elif event.key == pygame.K_c:
            self.sim_controller.submit(self._clear)
        elif event.key == pygame.K_e:
            self.sim_controller.submit(self._cycle_environment)
        elif event.key == pygame.K_g:
            self.sim_controller.submit(self._toggle_mode)
        elif event.key == pygame.K_n:
            self.sim_controller.submit(self._next_target)
        elif event.key == pygame.K_SPACE:
            self.sim_controller.toggle_running()
        elif event.key == pygame.K_PERIOD:
            self.sim_controller.step_once()

    def update(self, dt_seconds: float) -> None:
        ticks = self.sim_controller.update(dt_seconds)
        if self.viewport is not None:
            for _ in range(ticks):
                self.viewport.advance_electrons()
            self._apply_electron_style()
        self._latest_snapshot = self.sim_controller.snapshot()

    def render(self) -> None:
        if self.screen is None or self.viewport is None or self._latest_snapshot is None:
            return
        self.screen.fill((10, 10, 30))
        viewport_surface = self.screen.subsurface(self.viewport.rect)
        self.viewport.render(viewport_surface, self._latest_snapshot)
        self._render_status()
        pygame.display.flip()

    def run(self) -> None:
        if self.screen is None or self.state.clock is None:
            self.setup()
        assert self.state.clock is not None
        while self.state.running:
            dt_ms = self.state.clock.tick(self.config.target_fps)
            for event in pygame.event.get():
                self.handle_event(event)
            self.update(dt_ms / 1000.0)
            self.render()
        pygame.quit()

    def status_lines(self) -> List[str]:
        simulation = self.controller.simulation
        regime = simulation.regime.value if simulation.regime else "custom"
        lines = [
            f"Mode: {self.controller.mode.value}   Environment: {regime}   "
            f"Atoms: {len(simulation)}   Molecules: {self.controller.molecule_count}"
            + ("" if self.sim_controller.is_running else "   [paused]"),
        ]
        target = self.controller.current_target()
        if target is not None:
            counts = simulation.element_counts()
            progress = ", ".join(f"{s} {counts[s]}/{n}" for s, n in target.composition.items())
            lines.append(f"Target: {target.name} ({target.formula})   {progress}")
        keys = "  ".join(f"{index + 1}:{symbol}" for index, symbol in enumerate(self.hotkey_symbols()))
        lines.append(f"Keys {keys}   Picked [ ]: {self.picked_symbol or '-'} (A adds)")
        selected = self._selected_atom()
        if selected is not None:
            element = selected.element
            lines.append(
                f"Selected: {element.name} ({element.symbol})   EN {element.electronegativity:.2f}   "
                f"bonds {selected.bond_count}/{element.max_valence}"
            )
        if self.controller.bond_log.entries:
            lines.append("Recent bonds: " + "; ".join(self.controller.bond_log.entries))
        if self.state.success_message:
            lines.append(self.state.success_message)
        return lines

    def _render_status(self) -> None:
        assert self.screen is not None and self.font is not None
        top = self.config.height - self.config.status_height + 6
        for index, line in enumerate(self.status_lines()):
            label = self.font.render(line, True, (230, 230, 230))
            self.screen.blit(label, (10, top + index * 20))

    def _select_at(self, position_px: Tuple[int, int]) -> None:
        if self.viewport is None or self._latest_snapshot is None:
            return
        if not self.viewport.rect.collidepoint(position_px):
            return
        self.viewport.set_selected_atom(self.viewport.atom_at(self._latest_snapshot, position_px))

    def _selected_atom(self) -> Optional[Atom]:
        if self.viewport is None or self.viewport.selected_atom_id is None:
            return None
        return self.controller.simulation.get_atom(self.viewport.selected_atom_id)

    def _add_element(self, symbol: str) -> None:
        self.controller.add_atom(self.catalog[symbol], self.sim_controller.bounds)

    def _clear(self) -> None:
        self.controller.clear()
        self.state.success_message = None
        if self.viewport is not None:
            self.viewport.forget_atoms()

    @property
    def picked_symbol(self) -> Optional[str]:
        if not self._element_order:
            return None
        return self._element_order[self._picked_index]

    def hotkey_symbols(self) -> List[str]:
        return hotkey_palette(self.config.hotkey_symbols, self.controller.current_target(), self.catalog)

    def _pick_element(self, offset: int) -> None:
        if self._element_order:
            self._picked_index = (self._picked_index + offset) % len(self._element_order)

    def _bind_hotkeys(self) -> None:
        self._hotkeys = {
            getattr(pygame, f"K_{index + 1}"): symbol for index, symbol in enumerate(self.hotkey_symbols())
        }

    def _apply_electron_style(self) -> None:
        if self.viewport is not None:
            speed, expansion = electron_style(self.controller.simulation.regime)
            self.viewport.config.electron_speed = speed
            self.viewport.config.orbit_expansion = expansion

    def _cycle_environment(self) -> None:
        regimes = list(EnvironmentRegime)
        current = self.controller.simulation.regime or EnvironmentRegime.IDEAL
        regime = regimes[(regimes.index(current) + 1) % len(regimes)]
        self.controller.set_environment(regime)
        self._apply_electron_style()

    def _toggle_mode(self) -> None:
        mode = ExperimentMode.FREE if self.controller.mode is ExperimentMode.GUIDED else ExperimentMode.GUIDED
        self.controller.set_mode(mode)
        self._reset_view()

    def _next_target(self) -> None:
        if self.controller.advance() is not None:
            self._reset_view()

    def _reset_view(self) -> None:
        self.state.success_message = None
        self._bind_hotkeys()
        self._apply_electron_style()
        if self.viewport is not None:
            self.viewport.forget_atoms()

    def _on_formed(self, target: TargetMolecule) -> None:
        self.state.success_message = f"Well done! You built {target.name} ({target.formula})."
        logger.info(self.state.success_message)
