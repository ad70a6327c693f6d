"""SketchCalc - handwritten math recognition backed by a multimodal model."""

__version__ = "0.1.0"

from sketchcalc.core.config import SketchcalcConfig, config

__all__ = [
    "SketchcalcConfig",
    "config",
]
