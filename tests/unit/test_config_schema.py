"""
Schema-oriented tests for the bundled scenario presets.

These tests provide early warnings if preset structures drift away from what
the scenario loader expects.
"""

from __future__ import annotations

from typing import Set

import pytest
import yaml

PRESETS = ["water.yaml", "guided_water.yaml", "sandbox.yaml"]


@pytest.fixture(params=PRESETS)
def preset(request, project_root):
    path = project_root / "config" / "presets" / request.param
    with path.open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def test_preset_sections(preset) -> None:
    required_sections: Set[str] = {"metadata", "simulation", "system"}
    assert required_sections.issubset(preset), f"Missing sections: {required_sections - set(preset)}"
    assert "name" in preset["metadata"]


def test_preset_atoms_have_core_fields(preset, catalog) -> None:
    for atom in preset["system"]["atoms"]:
        assert atom["element"] in catalog
        if "position" in atom:
            assert len(atom["position"]) == 2
        assert int(atom.get("count", 1)) >= 1


def test_guided_presets_name_a_target(preset, molecule_catalog) -> None:
    settings = preset["simulation"]
    if settings.get("mode") == "guided":
        assert molecule_catalog.find(settings["target"]) is not None
