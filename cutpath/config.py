# config.py
# Measurement and preview settings. Values come from the environment (or a .env file)
# and fall back to the documented defaults.
import math
import os
from dataclasses import dataclass, fields, replace

from dotenv import load_dotenv

from cutpath.errors import ConfigurationError

# Load environment variables from .env if present
load_dotenv()

DISPLAY_SCALE_FACTOR = 0.1
CIRCLE_SEGMENTS = 64
ARC_SEGMENTS = 32
SPLINE_SAMPLES = 50
SPLINE_LENGTH_RESOLUTION = 10
POINT_TOLERANCE = 0.0

ENV_VARS = {
    "display_scale": "CUTPATH_DISPLAY_SCALE",
    "circle_segments": "CUTPATH_CIRCLE_SEGMENTS",
    "arc_segments": "CUTPATH_ARC_SEGMENTS",
    "spline_samples": "CUTPATH_SPLINE_SAMPLES",
    "spline_resolution": "CUTPATH_SPLINE_RESOLUTION",
    "point_tolerance": "CUTPATH_POINT_TOLERANCE",
    "bulge_aware_length": "CUTPATH_BULGE_AWARE_LENGTH",
    "adaptive_tessellation": "CUTPATH_ADAPTIVE_TESSELLATION",
}


@dataclass(frozen=True)
class Settings:
    """Tunable constants shared by the measurement, pierce and tessellation code."""

    display_scale: float = DISPLAY_SCALE_FACTOR
    circle_segments: int = CIRCLE_SEGMENTS
    arc_segments: int = ARC_SEGMENTS
    spline_samples: int = SPLINE_SAMPLES
    spline_resolution: int = SPLINE_LENGTH_RESOLUTION
    point_tolerance: float = POINT_TOLERANCE
    bulge_aware_length: bool = False
    adaptive_tessellation: bool = False

    def __post_init__(self):
        if not math.isfinite(self.display_scale) or self.display_scale <= 0:
            raise ConfigurationError(f"display_scale must be a positive number, got {self.display_scale}")
        for name in ("circle_segments", "arc_segments", "spline_samples", "spline_resolution"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if not math.isfinite(self.point_tolerance) or self.point_tolerance < 0:
            raise ConfigurationError(f"point_tolerance must be >= 0, got {self.point_tolerance}")

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        values = {}
        for field in fields(cls):
            raw = environ.get(ENV_VARS[field.name])
            if raw is None or str(raw).strip() == "":
                continue
            values[field.name] = _coerce(field.name, field.type, raw)
        return cls(**values)

    @classmethod
    def from_mapping(cls, mapping):
        """Build settings from a Flask-style config mapping keyed by the env var names."""
        return cls.from_env({key: mapping[key] for key in ENV_VARS.values() if key in mapping})

    def with_overrides(self, **overrides):
        return replace(self, **overrides)


def _coerce(name, type_name, raw):
    if isinstance(raw, (bool, int, float)) and not isinstance(raw, str):
        text = str(int(raw)) if isinstance(raw, bool) else str(raw)
    else:
        text = str(raw).strip()
    type_name = getattr(type_name, "__name__", type_name)
    try:
        if type_name == "bool":
            return text.lower() in ("1", "true", "yes", "on")
        if type_name == "int":
            return int(text)
        return float(text)
    except ValueError:
        raise ConfigurationError(f"Invalid value for {ENV_VARS[name]}: {raw!r}") from None


def load_settings():
    """Settings from the current environment."""
    return Settings.from_env()
