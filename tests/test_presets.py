"""Tests for YAML shaping presets."""

import pytest

from noisefield import InvalidParameterError, PresetLoader, ShapingParameters, load_preset
from noisefield.presets import BUNDLED_PRESETS_DIR


def _write(path, text):
    path.write_text(text)
    return path


def test_bundled_presets_available():
    assert PresetLoader().available() == ["default", "mask", "soft", "terrain"]


@pytest.mark.parametrize("name", ["default", "mask", "soft", "terrain"])
def test_bundled_presets_load(name):
    shaping = PresetLoader().load(name)
    assert isinstance(shaping, ShapingParameters)


def test_default_preset_matches_defaults():
    assert PresetLoader().load("default") == ShapingParameters()


def test_terrain_preset_values():
    shaping = load_preset("terrain")
    assert shaping.octaves == 6
    assert shaping.first_octave_contrast == 0.6


def test_load_is_cached():
    loader = PresetLoader()
    first = loader.load("mask")
    assert loader.load("mask") is first
    loader.clear_cache()
    assert loader.load("mask") == first


def test_missing_preset():
    with pytest.raises(FileNotFoundError, match="nope"):
        PresetLoader().load("nope")


def test_custom_directory(tmp_path):
    _write(tmp_path / "ridges.yaml", "name: ridges\nshaping:\n  octaves: 5\n  contrast: 2.5\n")
    shaping = PresetLoader([tmp_path]).load("ridges")
    assert shaping == ShapingParameters(octaves=5, contrast=2.5)


def test_missing_shaping_section_uses_defaults(tmp_path):
    _write(tmp_path / "plain.yaml", "name: plain\n")
    assert PresetLoader([tmp_path]).load("plain") == ShapingParameters()


def test_search_path_order(tmp_path):
    """Earlier search paths shadow later ones."""
    _write(tmp_path / "default.yaml", "shaping:\n  octaves: 1\n")
    loader = PresetLoader([tmp_path, BUNDLED_PRESETS_DIR])
    assert loader.load("default").octaves == 1
    assert "terrain" in loader.available()


@pytest.mark.parametrize(
    "text",
    [
        "shaping:\n  octaves: 0\n",
        "shaping:\n  persistence: -1\n",
        "shaping:\n  lacunarity: 2.0\n",
        "shaping: [1, 2]\n",
        "- just\n- a list\n",
        "shaping: {octaves: 3\n",
    ],
)
def test_invalid_presets(tmp_path, text):
    _write(tmp_path / "bad.yaml", text)
    with pytest.raises(InvalidParameterError):
        PresetLoader([tmp_path]).load("bad")
