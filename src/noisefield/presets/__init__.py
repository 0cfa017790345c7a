"""Named shaping presets."""

from .loader import BUNDLED_PRESETS_DIR, PresetLoader, load_preset

__all__ = ["BUNDLED_PRESETS_DIR", "PresetLoader", "load_preset"]
