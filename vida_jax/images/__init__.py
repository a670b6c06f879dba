# vida_jax/images/__init__.py
"""
vida_jax.images
===============

Image boundary of the package: the normalized image container, the raster
evaluator that samples filters on pixel grids, and image moments/modifiers.
File formats are not handled here; build images from arrays.
"""
from .raster import pixel_centers, rasterize, sample, evaluate_on
from .image import NormalizedImage, make_image
from .modifiers import centroid, inertia, clip_image, window_image, downsample, blur

__all__ = [
    "NormalizedImage",
    "make_image",
    "pixel_centers",
    "rasterize",
    "sample",
    "evaluate_on",
    "centroid",
    "inertia",
    "clip_image",
    "window_image",
    "downsample",
    "blur",
]
