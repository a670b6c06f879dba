# vida_jax/filters/spiral.py
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

from ..constants import DENSITY_FLOOR, LOGSPIRAL_WINDING
from ..geometry import azimuth, radius
from .base import Filter


@register_pytree_node_class
@dataclass(frozen=True)
class LogSpiral(Filter):
    """
    Segment of a logarithmic spiral arm.

    The arm r = a exp(k theta), with k = sqrt(1 - kappa^2) / kappa, is anchored
    so that it reaches radius `r0` at winding angle 10 pi past `xi`. The
    density is a Gaussian of width `sigma` in the radial distance to the
    nearest branch, tapered by a Gaussian of width `delta_phi / 2` in winding
    angle away from the anchor.
    """
    r0: float
    kappa: float
    sigma: float
    delta_phi: float
    xi: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = (
        "r0", "kappa", "sigma", "delta_phi", "xi", "x0", "y0",
    )

    def _validate(self):
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("kappa", lambda v: (v > 0) & (v < 1), "0 < kappa < 1")
        self._require("sigma", lambda v: v > 0, "sigma > 0")
        self._require("delta_phi", lambda v: v > 0, "delta_phi > 0")

    def evaluate(self, x, y):
        ex = x - self.x0
        ey = y - self.y0
        anchor = LOGSPIRAL_WINDING * jnp.pi

        k = jnp.sqrt(1.0 - self.kappa ** 2) / self.kappa
        a = self.r0 / jnp.exp(k * anchor)

        # r = 0 has no winding number; keep the log finite there
        r = jnp.maximum(radius(ex, ey), 1e-12)
        alpha = azimuth(ey, ex) - self.xi

        # bracket the point between the two nearest branches
        n = (jnp.log(r / a) / k - alpha) / (2 * jnp.pi)
        n_up = jnp.ceil(n)
        n_down = jnp.floor(n)
        d_up = jnp.abs(a * jnp.exp(k * (alpha + 2 * jnp.pi * n_up)) - r)
        d_down = jnp.abs(a * jnp.exp(k * (alpha + 2 * jnp.pi * n_down)) - r)

        use_up = d_up < d_down
        winding = jnp.where(use_up, n_up, n_down)
        dist = jnp.where(use_up, d_up, d_down)

        dtheta = anchor - (alpha + 2 * jnp.pi * winding)
        return jnp.exp(
            -dist ** 2 / (2.0 * self.sigma ** 2)
            - dtheta ** 2 / (2.0 * (self.delta_phi / 2) ** 2)
        ) + DENSITY_FLOOR
