"""Load shaping presets from YAML configuration files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from ..errors import InvalidParameterError
from ..shaping import ShapingParameters

logger = logging.getLogger(__name__)

# Presets shipped with the package
BUNDLED_PRESETS_DIR = Path(__file__).parent / "data"


class PresetLoader:
    """Loads named shaping presets from YAML files.

    YAML format:
    ```yaml
    name: terrain
    description: Broad landmasses with fine coastline detail
    shaping:
      octaves: 6
      persistence: 0.5
      first_octave_contrast: 0.6
      bias: 0.15
    ```

    Keys missing from ``shaping`` take the ``ShapingParameters`` defaults.
    """

    def __init__(self, search_paths: list[Path] | None = None) -> None:
        """Initialize loader with search paths.

        Args:
            search_paths: Directories to search for preset YAML files, in
                         order. Defaults to the bundled presets directory.
        """
        if search_paths is None:
            self.search_paths = [BUNDLED_PRESETS_DIR]
        else:
            self.search_paths = [Path(p) for p in search_paths]

        self._cache: dict[str, ShapingParameters] = {}

    def load(self, name: str) -> ShapingParameters:
        """Load a preset by name.

        Searches for {name}.yaml in search paths.

        Args:
            name: Preset name (without .yaml extension)

        Returns:
            ShapingParameters instance

        Raises:
            FileNotFoundError: If preset YAML not found
            InvalidParameterError: If YAML format or values are invalid
        """
        if name in self._cache:
            return self._cache[name]

        yaml_path = self._find_yaml(name)
        if yaml_path is None:
            raise FileNotFoundError(
                f"Preset '{name}' not found in search paths: {self.search_paths}"
            )

        shaping = self._load_yaml(yaml_path)
        self._cache[name] = shaping
        logger.debug("Loaded preset %r from %s", name, yaml_path)
        return shaping

    def available(self) -> list[str]:
        """List preset names found in the search paths, sorted."""
        names = set()
        for search_path in self.search_paths:
            if search_path.is_dir():
                names.update(p.stem for p in search_path.glob("*.yaml"))
        return sorted(names)

    def _find_yaml(self, name: str) -> Path | None:
        """Find YAML file for preset name."""
        for search_path in self.search_paths:
            yaml_path = search_path / f"{name}.yaml"
            if yaml_path.exists():
                return yaml_path
        return None

    def _load_yaml(self, path: Path) -> ShapingParameters:
        """Load preset from YAML file."""
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise InvalidParameterError(f"Malformed preset file {path}: {exc}") from exc

        return self._parse_preset(data, path)

    def _parse_preset(self, data: Any, path: Path) -> ShapingParameters:
        """Parse preset definition from YAML data."""
        if not isinstance(data, dict):
            raise InvalidParameterError(f"Preset file {path} must contain a mapping")

        shaping_data = data.get("shaping", {})
        if not isinstance(shaping_data, dict):
            raise InvalidParameterError(f"'shaping' in {path} must be a mapping")

        try:
            return ShapingParameters.from_dict(shaping_data)
        except InvalidParameterError as exc:
            raise InvalidParameterError(f"Invalid preset {path}: {exc}") from exc

    def clear_cache(self) -> None:
        """Clear the preset cache."""
        self._cache.clear()


_default_loader: PresetLoader | None = None


def load_preset(name: str) -> ShapingParameters:
    """Load a bundled preset by name."""
    global _default_loader
    if _default_loader is None:
        _default_loader = PresetLoader()
    return _default_loader.load(name)
