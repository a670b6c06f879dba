# vida_jax/filters/image.py
"""
ImageFilter: a pre-rasterized image used as a template.

Only the shift (`x0`, `y0`) is a parameter; the pixel data is static and
travels in the filter shape, so it is never part of the flat vector.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import jax.numpy as jnp
from jax.scipy.ndimage import map_coordinates
from jax.tree_util import register_pytree_node_class

from ..constants import DENSITY_FLOOR
from .base import Filter, FilterShape


@dataclass(frozen=True, eq=False)
class ImageTemplate:
    """
    Static pixel data of an ImageFilter.

    data: (ny, nx) intensities, data[j, i] at (x[i], y[j])
    x: (nx,) pixel-center x coordinates, decreasing
    y: (ny,) pixel-center y coordinates, increasing

    Two templates are equal when they hold the very same arrays, so every
    template taken from one NormalizedImage compares (and hashes) equal and
    can sit in pytree aux data and in a FilterShape.
    """
    data: jnp.ndarray
    x: jnp.ndarray
    y: jnp.ndarray

    @classmethod
    def from_image(cls, image) -> "ImageTemplate":
        return cls(data=image.data, x=image.x, y=image.y)

    def _key(self):
        return (id(self.data), id(self.x), id(self.y))

    def __eq__(self, other):
        if not isinstance(other, ImageTemplate):
            return NotImplemented
        return self.data is other.data and self.x is other.x and self.y is other.y

    def __hash__(self):
        return hash(self._key())

    def __repr__(self):
        ny, nx = self.data.shape
        return f"ImageTemplate({ny}x{nx} @ {id(self.data):#x})"

    def __call__(self, x, y):
        """Bilinear lookup at (x, y); zero outside the image."""
        x, y = jnp.broadcast_arrays(jnp.asarray(x, dtype=float), jnp.asarray(y, dtype=float))
        i = (self.x[0] - x) / (self.x[0] - self.x[1])
        j = (y - self.y[0]) / (self.y[1] - self.y[0])
        return map_coordinates(self.data, [j, i], order=1, mode="constant", cval=0.0)


@register_pytree_node_class
@dataclass(frozen=True, eq=False)
class ImageFilter(Filter):
    """
    Template built from an image, shifted by (`x0`, `y0`).

    Example
    -------
    >>> filt = ImageFilter.from_image(0.0, 0.0, image)
    """
    x0: float
    y0: float
    template: ImageTemplate

    param_names: ClassVar[Tuple[str, ...]] = ("x0", "y0")

    @classmethod
    def from_image(cls, x0, y0, image) -> "ImageFilter":
        return cls(x0, y0, ImageTemplate.from_image(image))

    @property
    def shape(self) -> FilterShape:
        return FilterShape(self.kind, 2, meta=(self.template,))

    @classmethod
    def from_flat(cls, p, shape: FilterShape) -> "ImageFilter":
        (template,) = shape.meta
        return cls(p[0], p[1], template)

    def evaluate(self, x, y):
        return self.template(x - self.x0, y - self.y0) + DENSITY_FLOOR

    def tree_flatten(self):
        return (self.x0, self.y0), self.template

    @classmethod
    def tree_unflatten(cls, aux, children):
        obj = super().tree_unflatten(None, children)
        object.__setattr__(obj, "template", aux)
        return obj
