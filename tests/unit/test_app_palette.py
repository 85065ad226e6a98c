"""Tests for the viewer's element hotkeys and regime electron styles."""

from __future__ import annotations

from atomsim.environment import EnvironmentRegime
from atomsim.ui.app import DEFAULT_HOTKEY_SYMBOLS, electron_style, hotkey_palette


def test_every_target_can_be_built_from_the_number_keys(catalog, molecule_catalog) -> None:
    unreachable = [
        target.formula
        for target in molecule_catalog
        if not set(target.composition) <= set(hotkey_palette(DEFAULT_HOTKEY_SYMBOLS, target, catalog))
    ]
    assert unreachable == []


def test_palette_puts_target_elements_first(catalog, molecule_catalog) -> None:
    sulfuric = molecule_catalog.find("H2SO4")
    assert sulfuric is not None
    palette = hotkey_palette(DEFAULT_HOTKEY_SYMBOLS, sulfuric, catalog)
    assert set(palette[:3]) == {"H", "S", "O"}
    assert len(palette) == 9
    assert len(set(palette)) == 9


def test_free_mode_palette_is_the_defaults(catalog) -> None:
    assert hotkey_palette(DEFAULT_HOTKEY_SYMBOLS, None, catalog) == DEFAULT_HOTKEY_SYMBOLS
    assert hotkey_palette(["H", "Xx", "H", "O"], None, catalog) == ["H", "O"]


def test_electron_style_follows_regime() -> None:
    assert electron_style(EnvironmentRegime.REAL) == (0.15, 1.5)
    assert electron_style(EnvironmentRegime.IDEAL) == (0.05, 1.0)
    assert electron_style(EnvironmentRegime.STABLE) == (0.05, 1.0)
    assert electron_style(None) == (0.05, 1.0)
