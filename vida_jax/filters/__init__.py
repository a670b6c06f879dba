# vida_jax/filters/__init__.py
"""
vida_jax.filters
================

Closed family of parametric brightness templates and their algebra.

Leaf kinds
----------
GaussianRing, SlashedGaussianRing, EllipticalGaussianRing, TIDAGaussianRing,
GeneralGaussianRing, CosineRing, Disk, AsymGaussian, Constant, LogSpiral,
ImageFilter

Composites
----------
Sum (combine), Scale (scale), plus stack/split helpers.

Codec
-----
pack / unpack / shape_of move between a filter tree and its flat vector.
"""
from .base import Filter, FilterShape, register, get

from .rings import (
    GaussianRing,
    SlashedGaussianRing,
    EllipticalGaussianRing,
    TIDAGaussianRing,
    GeneralGaussianRing,
)
from .cosine import CosineRing, cosine_ring_size
from .blobs import Disk, AsymGaussian, Constant
from .spiral import LogSpiral
from .image import ImageFilter, ImageTemplate
from .codec import pack, unpack, shape_of
from .composite import Sum, Scale, combine, scale, stack, split

# --------------------------------------------------
# Registry (closed set of kinds used by the codec)
# --------------------------------------------------
register("GaussianRing", GaussianRing)
register("SlashedGaussianRing", SlashedGaussianRing)
register("EllipticalGaussianRing", EllipticalGaussianRing)
register("TIDAGaussianRing", TIDAGaussianRing)
register("GeneralGaussianRing", GeneralGaussianRing)
register("CosineRing", CosineRing)
register("Disk", Disk)
register("AsymGaussian", AsymGaussian)
register("Constant", Constant)
register("LogSpiral", LogSpiral)
register("ImageFilter", ImageFilter)
register("Sum", Sum)
register("Scale", Scale)

__all__ = [
    "Filter",
    "FilterShape",
    "get",
    # leaves
    "GaussianRing",
    "SlashedGaussianRing",
    "EllipticalGaussianRing",
    "TIDAGaussianRing",
    "GeneralGaussianRing",
    "CosineRing",
    "cosine_ring_size",
    "Disk",
    "AsymGaussian",
    "Constant",
    "LogSpiral",
    "ImageFilter",
    "ImageTemplate",
    # composites
    "Sum",
    "Scale",
    "combine",
    "scale",
    "stack",
    "split",
    # codec
    "pack",
    "unpack",
    "shape_of",
]
