"""text-shimmer: animated shimmer placeholders from text layers.

This library turns a text layer of a design document into a looping
"shimmer" loading placeholder:
- a hollow glyph mask over a translucent backdrop
- a sweeping white gradient, captured as start and end variants
- timed prototype transitions that loop the two variants

Example:
    >>> from pathlib import Path
    >>> from text_shimmer import ShimmerGenerator
    >>> generator = ShimmerGenerator()
    >>> generator.generate_file(Path("design.json"), Path("design.shimmer.json"))
"""

from text_shimmer.api import GenerationResult, ShimmerGenerator
from text_shimmer.config import Config, PlacementMode
from text_shimmer.exceptions import (
    CompositionError,
    ConfigError,
    DocumentFormatError,
    FontLoadError,
    HostError,
    NodeRemovedError,
    SelectionError,
    ShimmerError,
)
from text_shimmer.plugin import CreateShimmerRequest, SelectionStatus, ShimmerPlugin
from text_shimmer.scene.memory import MemoryHost
from text_shimmer.shimmer.pipeline import ShimmerBuilder, ShimmerOptions, ShimmerResult

__version__ = "0.1.0"

__all__ = [
    # Main API
    "ShimmerGenerator",
    "GenerationResult",
    "ShimmerPlugin",
    "CreateShimmerRequest",
    "SelectionStatus",
    "ShimmerBuilder",
    "ShimmerOptions",
    "ShimmerResult",
    "MemoryHost",
    "Config",
    "PlacementMode",
    # Exceptions
    "ShimmerError",
    "SelectionError",
    "FontLoadError",
    "NodeRemovedError",
    "HostError",
    "CompositionError",
    "ConfigError",
    "DocumentFormatError",
    # Metadata
    "__version__",
]
