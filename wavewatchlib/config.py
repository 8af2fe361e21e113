from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .models import BandLayout, Palette, ViewerOptions


class ConfigError(Exception):
    """Raised when configuration validation fails."""
    pass


@dataclass
class ConfigFieldError:
    """A single validation error for one configuration field.

    Attributes:
        key:     The config key that failed validation.
        value:   The offending value.
        message: Human-readable explanation of what is wrong.
    """
    key: str
    value: Any
    message: str


@dataclass(frozen=True)
class ParamSpec:
    """Declarative specification for a single configuration parameter."""
    key: str
    type: type                       # expected Python type
    default: Any
    label: str                       # short UI label
    description: str = ""            # longer help text
    min: int | None = None           # inclusive lower bound


VIEWER_PARAMS: list[ParamSpec] = [
    ParamSpec(
        key="raster_width", type=int, default=2000, min=0,
        label="Raster width (px)",
        description=(
            "Samples per band row.  The raster is drawn at this width and "
            "then fitted to the window.  0 draws at the window width."
        ),
    ),
    ParamSpec(
        key="band_height", type=int, default=64, min=2,
        label="Band height (px)",
        description="Height of one waveform band; full scale spans it.",
    ),
    ParamSpec(
        key="band_space", type=int, default=16, min=0,
        label="Band spacing (px)",
        description="Gap above, between and below bands.",
    ),
    ParamSpec(
        key="upscale", type=bool, default=False,
        label="Stretch narrow rasters",
        description=(
            "When the raster is narrower than the window, stretch it to the "
            "window width instead of leaving it at natural resolution."
        ),
    ),
    ParamSpec(
        key="debounce_ms", type=int, default=250, min=0,
        label="Reload debounce (ms)",
        description="Quiet period after the last file change before reloading.",
    ),
    ParamSpec(
        key="decode_in_background", type=bool, default=False,
        label="Decode reloads in background",
        description=(
            "Re-read the file on a worker thread instead of inside the "
            "event loop.  Useful for long files."
        ),
    ),
]

COLOR_KEYS = ("background", "midline", "trace", "clip")


def default_config() -> dict[str, Any]:
    """Returns the built-in viewer defaults."""
    return {p.key: p.default for p in VIEWER_PARAMS}


def validate_param_values(
    params: list[ParamSpec],
    values: dict[str, Any],
) -> list[ConfigFieldError]:
    """Validate *values* against a list of :class:`ParamSpec` definitions.

    Returns a (possibly empty) list of :class:`ConfigFieldError` objects.
    Only keys present in *values* are checked; missing keys are not errors
    (they will receive their default).
    """
    errors: list[ConfigFieldError] = []

    for spec in params:
        if spec.key not in values:
            continue

        value = values[spec.key]
        expected = spec.type
        # bool is an int subclass; reject it for numeric fields.
        if expected is not bool and isinstance(value, bool):
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must be {expected.__name__}, got boolean.",
            ))
            continue
        if not isinstance(value, expected):
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must be {expected.__name__}, "
                f"got {type(value).__name__}.",
            ))
            continue

        if spec.min is not None and value < spec.min:
            errors.append(ConfigFieldError(
                spec.key, value,
                f"{spec.label} must be at least {spec.min}.",
            ))

    return errors


def validate_colors(colors: dict[str, Any]) -> list[ConfigFieldError]:
    """Check that every known color entry is a ``#rrggbb`` string."""
    errors: list[ConfigFieldError] = []
    for key in COLOR_KEYS:
        if key not in colors:
            continue
        value = colors[key]
        if parse_hex_color(value) is None:
            errors.append(ConfigFieldError(
                f"colors.{key}", value,
                f"Color '{key}' must be a #rrggbb string.",
            ))
    return errors


def validate_config(config: dict[str, Any]) -> None:
    """Validate a viewer config dict.

    Raises :class:`ConfigError` listing every invalid field.
    """
    errors = validate_param_values(VIEWER_PARAMS, config)
    if errors:
        lines = [e.message for e in errors]
        raise ConfigError(
            "Configuration has invalid values:\n  • " + "\n  • ".join(lines)
        )


def parse_hex_color(value: Any) -> tuple[int, int, int] | None:
    if not isinstance(value, str) or len(value) != 7 or not value.startswith("#"):
        return None
    try:
        return (int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16))
    except ValueError:
        return None


def build_options(config: dict[str, Any],
                  colors: dict[str, Any] | None = None) -> ViewerOptions:
    """Turn a validated config (plus optional hex colors) into ViewerOptions.

    Missing keys fall back to their defaults.
    """
    values = default_config()
    values.update({k: v for k, v in config.items() if k in values})
    validate_config(values)

    palette_args = {}
    for key in COLOR_KEYS:
        rgb = parse_hex_color((colors or {}).get(key))
        if rgb is not None:
            palette_args[key] = rgb

    return ViewerOptions(
        raster_width=values["raster_width"],
        layout=BandLayout(band_height=values["band_height"],
                          space=values["band_space"]),
        palette=Palette(**palette_args),
        upscale=values["upscale"],
        debounce_sec=values["debounce_ms"] / 1000.0,
        decode_in_background=values["decode_in_background"],
    )
