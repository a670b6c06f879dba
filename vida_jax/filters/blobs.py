# vida_jax/filters/blobs.py
"""Non-ring templates: disk, asymmetric Gaussian blob and constant floor."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

from ..constants import DENSITY_FLOOR
from ..geometry import radius, rotate
from .base import Filter


@register_pytree_node_class
@dataclass(frozen=True)
class Disk(Filter):
    """
    Smoothed disk: unity inside radius `r0`, Gaussian edge of width `alpha`
    outside.
    """
    r0: float
    alpha: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = ("r0", "alpha", "x0", "y0")

    def _validate(self):
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("alpha", lambda v: v > 0, "alpha > 0")

    def evaluate(self, x, y):
        r = radius(x - self.x0, y - self.y0)
        edge = jnp.exp(-((r - self.r0) ** 2) / (2.0 * self.alpha ** 2)) + DENSITY_FLOOR
        return jnp.where(r < self.r0, 1.0, edge)


@register_pytree_node_class
@dataclass(frozen=True)
class AsymGaussian(Filter):
    """
    Asymmetric Gaussian blob, useful to soak up non-ring emission.

    The size and asymmetry follow the ring conventions:

        sigma = sqrt(sigma_x * sigma_y),   tau = 1 - sigma_y / sigma_x

    with `xi` the orientation of the major axis (radians, north of east).
    """
    sigma: float
    tau: float
    xi: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = ("sigma", "tau", "xi", "x0", "y0")

    def _validate(self):
        self._require("sigma", lambda v: v > 0, "sigma > 0")
        self._require("tau", lambda v: (v >= 0) & (v < 1), "0 <= tau < 1")

    def evaluate(self, x, y):
        xr, yr = rotate(x - self.x0, y - self.y0, self.xi)
        sx2 = self.sigma ** 2 / (1.0 - self.tau)
        sy2 = self.sigma ** 2 * (1.0 - self.tau)
        return jnp.exp(-0.5 * (xr * xr / sx2 + yr * yr / sy2)) + DENSITY_FLOOR


@register_pytree_node_class
@dataclass(frozen=True)
class Constant(Filter):
    """
    Uniform flux floor.

    Soaks up low-level flux that would otherwise bias the other components.
    Filters are normalized downstream, so it needs no parameters; its weight in
    a sum comes from an enclosing `Scale`.
    """
    param_names: ClassVar[Tuple[str, ...]] = ()

    def evaluate(self, x, y):
        return jnp.ones(jnp.broadcast_shapes(jnp.shape(x), jnp.shape(y)))
