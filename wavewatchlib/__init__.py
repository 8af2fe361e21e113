from ._version import __version__
from .models import (
    SampleSequence,
    BandLayout,
    Palette,
    WatchEvent,
    ViewerOptions,
)
from .audio import DecodeError, load_samples, describe, format_duration
from .raster import rasterize, to_rgb32
from .rescale import fit, composite
from .reload import ChannelClosed, Sender, Receiver, WatchHandle, channel, watch
from .viewer import WaveformViewer, render_frame
from .config import (
    default_config,
    validate_config,
    validate_param_values,
    validate_colors,
    build_options,
    ConfigError,
    ConfigFieldError,
    ParamSpec,
    VIEWER_PARAMS,
)

__all__ = [
    "__version__",
    "SampleSequence",
    "BandLayout",
    "Palette",
    "WatchEvent",
    "ViewerOptions",
    "DecodeError",
    "load_samples",
    "describe",
    "format_duration",
    "rasterize",
    "to_rgb32",
    "fit",
    "composite",
    "ChannelClosed",
    "Sender",
    "Receiver",
    "WatchHandle",
    "channel",
    "watch",
    "WaveformViewer",
    "render_frame",
    "default_config",
    "validate_config",
    "validate_param_values",
    "validate_colors",
    "build_options",
    "ConfigError",
    "ConfigFieldError",
    "ParamSpec",
    "VIEWER_PARAMS",
]
