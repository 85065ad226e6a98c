"""
Run an AtomSim scenario from the command line.

    atomsim-run config/presets/water.yaml --steps 50
    atomsim-run config/presets/guided_water.yaml --ui
"""

from __future__ import annotations

import argparse
import logging
import pathlib
from typing import List, Optional

from atomsim.config_loader import SimulationBundle, load_simulation_from_yaml
from atomsim.chem_data import load_element_catalog


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run an AtomSim scenario.")
    parser.add_argument("scenario", type=pathlib.Path, help="Path to a scenario YAML file.")
    parser.add_argument(
        "--steps",
        type=int,
        default=100,
        help="Number of ticks to run headless (ignored with --ui).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )
    parser.add_argument("--ui", action="store_true", help="Open the pygame viewer.")
    return parser.parse_args(argv)


def summarize(bundle: SimulationBundle) -> List[str]:
    simulation = bundle.simulation
    controller = bundle.controller
    name = bundle.metadata.get("name", "scenario")
    lines = [
        f"{name}: step {simulation.current_step}",
        f"  atoms: {len(simulation)}  bonds: {len(simulation.bond_pairs())}  molecules: {controller.molecule_count}",
    ]
    for atom in simulation.atoms:
        partners = ",".join(str(i) for i in sorted(atom.bonded_ids)) or "-"
        lines.append(
            f"  #{atom.id:<3} {atom.element.symbol:<2} ({atom.position[0]:7.1f}, {atom.position[1]:7.1f})"
            f"  bonds {atom.bond_count} -> {partners}"
        )
    target = controller.current_target()
    if target is not None:
        status = controller.status()
        lines.append(
            f"  target {target.formula}: composition_complete={status.composition_complete} formed={status.formed}"
        )
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    catalog = load_element_catalog()
    bundle = load_simulation_from_yaml(args.scenario, catalog=catalog)

    if args.ui:
        from atomsim.ui.app import AppConfig, AtomSimApp

        bounds = bundle.bounds
        config = AppConfig(width=int(bounds.width), height=int(bounds.height) + AppConfig.status_height)
        AtomSimApp(bundle.controller, catalog, config).run()
        return 0

    for _ in range(max(0, args.steps)):
        bundle.controller.step(bundle.bounds)
    print("\n".join(summarize(bundle)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
