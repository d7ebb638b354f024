"""Conversion settings and JSON settings files."""

import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Dict, Any, List, Tuple

from config import settings as defaults
from core.dxf.contour_builder import TIE_BREAK_FIRST, TIE_BREAK_MODES


@dataclass
class ConversionSettings:
    """Options for one conversion batch. Defaults come from config.settings."""
    # Strip height of the virtual sheet [mm]
    strip_height: float = defaults.DEFAULT_STRIP_HEIGHT

    # Part spacing [mm] - passed on to the solver invocation, not written to the JSON
    spacing: float = defaults.DEFAULT_SPACING

    # Discretization
    arc_segments: int = defaults.DEFAULT_ARC_SEGMENTS
    spline_segments: int = defaults.DEFAULT_SPLINE_SEGMENTS
    max_edge_length: float = defaults.DEFAULT_MAX_EDGE_LENGTH

    # Contour chaining
    tolerance: float = defaults.DEFAULT_TOLERANCE
    auto_close: bool = defaults.DEFAULT_AUTO_CLOSE
    tie_break: str = TIE_BREAK_FIRST

    # Items
    allow_rotations: bool = defaults.DEFAULT_ALLOW_ROTATIONS
    problem_name: str = defaults.DEFAULT_PROBLEM_NAME

    # Holes and multi-part files
    hole_detection: str = defaults.DEFAULT_HOLE_DETECTION
    split_parts: bool = False
    part_distance: float = defaults.DEFAULT_PART_DISTANCE

    @property
    def allowed_rotations(self) -> Tuple[int, ...]:
        """Rotations in degrees offered to the solver."""
        if self.allow_rotations:
            return defaults.ROTATIONS_ALL
        return defaults.ROTATIONS_NONE

    def validate(self) -> 'ConversionSettings':
        """Raise ValueError listing every invalid option; return self otherwise."""
        errors: List[str] = []

        if self.strip_height <= 0:
            errors.append(f"strip_height must be positive (got {self.strip_height})")
        if self.spacing < 0:
            errors.append(f"spacing must not be negative (got {self.spacing})")
        if self.arc_segments < 3:
            errors.append(f"arc_segments must be at least 3 (got {self.arc_segments})")
        if self.spline_segments < 1:
            errors.append(f"spline_segments must be at least 1 (got {self.spline_segments})")
        if self.max_edge_length <= 0:
            errors.append(f"max_edge_length must be positive (got {self.max_edge_length})")
        if self.tolerance <= 0:
            errors.append(f"tolerance must be positive (got {self.tolerance})")
        if self.tie_break not in TIE_BREAK_MODES:
            errors.append(f"tie_break must be one of {', '.join(TIE_BREAK_MODES)}")
        if self.hole_detection not in defaults.HOLE_DETECTION_MODES:
            errors.append(
                f"hole_detection must be one of {', '.join(defaults.HOLE_DETECTION_MODES)}"
            )
        if self.part_distance < 0:
            errors.append(f"part_distance must not be negative (got {self.part_distance})")

        if errors:
            raise ValueError(f"Invalid conversion settings: {'; '.join(errors)}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ConversionSettings':
        """Build settings from a dict; unknown keys are ignored, missing keys use defaults."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load settings from a JSON file.

    Args:
        config_path: Path to the settings file

    Returns:
        Settings dictionary
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return json.load(f)


def save_config(settings: ConversionSettings, config_path: str):
    """Save settings to a JSON file."""
    with open(Path(config_path), 'w', encoding='utf-8') as f:
        json.dump(settings.to_dict(), f, indent=4)


def create_settings_from_config(config: Dict[str, Any] = None, **overrides) -> ConversionSettings:
    """
    Create validated ConversionSettings from a settings dictionary.

    Args:
        config: Settings dict (defaults if None)
        **overrides: Values taking precedence over the dict; None values are skipped

    Returns:
        ConversionSettings instance
    """
    data = dict(config or {})
    data.update({k: v for k, v in overrides.items() if v is not None})
    return ConversionSettings.from_dict(data).validate()


__all__ = [
    'ConversionSettings',
    'load_config',
    'save_config',
    'create_settings_from_config'
]
