# vida_jax/__init__.py
"""
vida_jax
========

Fit parametric brightness templates (filters) to images by minimizing a
probability divergence between the normalized image and the normalized
filter.

Subpackages
-----------
filters     closed family of templates, their algebra and the flat codec
images      normalized image container, raster evaluator, modifiers
divergence  Bhattacharyya and Kullback-Leibler divergences, flat objectives
extraction  ExtractionContext and the pluggable Minimizer boundary
geometry    rotation and point-to-ellipse distance kernels
"""
import jax

# Divergences and ellipse projections are evaluated in double precision.
jax.config.update("jax_enable_x64", True)

from . import errors
from .errors import (
    VidaError,
    InvalidParameter,
    ParameterCountMismatch,
    DegenerateDistribution,
    InvalidBounds,
)
from .filters import (
    Filter,
    FilterShape,
    GaussianRing,
    SlashedGaussianRing,
    EllipticalGaussianRing,
    TIDAGaussianRing,
    GeneralGaussianRing,
    CosineRing,
    Disk,
    AsymGaussian,
    Constant,
    LogSpiral,
    ImageFilter,
    Sum,
    Scale,
    combine,
    scale,
    stack,
    split,
    pack,
    unpack,
    shape_of,
)
from .images import NormalizedImage, make_image, rasterize, evaluate_on
from .divergence import Divergence, DivergenceCFG, Bhattacharyya, KullbackLeibler, make_objective
from .extraction import (
    ExtractionContext,
    Minimizer,
    MinimizeResult,
    ExtractionRun,
    extract,
    best_of,
    ProjectedGradient,
    ProjectedGradientCFG,
)

__version__ = "0.1.0"

__all__ = [
    "errors",
    "VidaError",
    "InvalidParameter",
    "ParameterCountMismatch",
    "DegenerateDistribution",
    "InvalidBounds",
    "Filter",
    "FilterShape",
    "GaussianRing",
    "SlashedGaussianRing",
    "EllipticalGaussianRing",
    "TIDAGaussianRing",
    "GeneralGaussianRing",
    "CosineRing",
    "Disk",
    "AsymGaussian",
    "Constant",
    "LogSpiral",
    "ImageFilter",
    "Sum",
    "Scale",
    "combine",
    "scale",
    "stack",
    "split",
    "pack",
    "unpack",
    "shape_of",
    "NormalizedImage",
    "make_image",
    "rasterize",
    "evaluate_on",
    "Divergence",
    "DivergenceCFG",
    "Bhattacharyya",
    "KullbackLeibler",
    "make_objective",
    "ExtractionContext",
    "Minimizer",
    "MinimizeResult",
    "ExtractionRun",
    "extract",
    "best_of",
    "ProjectedGradient",
    "ProjectedGradientCFG",
]
