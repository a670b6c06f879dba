# vida_jax/filters/rings.py
"""
Gaussian ring templates.

All rings share the same radial profile, a Gaussian in the (squared) distance
to a reference curve of radius `r0`, and differ in how the curve is deformed
(ellipticity) and how the brightness varies with azimuth (slash).

For the elliptical kinds `r0` is the geometric mean of the semi-axes,
r0 = sqrt(a*b), and the asymmetry is tau = 1 - b/a, so that

    a = r0 / sqrt(1 - tau),   b = r0 * sqrt(1 - tau).

The elliptical rings are not normalized: the distance to an ellipse has no
closed form, so neither does the integral of the density.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

from ..constants import DENSITY_FLOOR
from ..geometry import azimuth, ellipse_sqdist, radius, rotate
from .base import Filter


def _semi_axes(r0, tau):
    q = jnp.sqrt(1.0 - tau)
    return r0 / q, r0 * q


def _slash(s, phi):
    return (1.0 - s * jnp.cos(phi)) / (1.0 + s)


@register_pytree_node_class
@dataclass(frozen=True)
class GaussianRing(Filter):
    """
    Symmetric Gaussian ring: the simplest template, recovering a center
    (`x0`, `y0`), radius `r0` and thickness `sigma`.

    Example
    -------
    >>> GaussianRing(r0=20.0, sigma=5.0, x0=0.0, y0=-10.0)
    """
    r0: float
    sigma: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = ("r0", "sigma", "x0", "y0")

    def _validate(self):
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("sigma", lambda v: v > 0, "sigma > 0")

    def evaluate(self, x, y):
        r = radius(x - self.x0, y - self.y0)
        return jnp.exp(-((r - self.r0) ** 2) / (2.0 * self.sigma ** 2)) + DENSITY_FLOOR


@register_pytree_node_class
@dataclass(frozen=True)
class SlashedGaussianRing(Filter):
    """
    Gaussian ring with a cosine brightness modulation ("slash").

    The modulation n(phi) = (1 - s cos phi) / (1 + s) keeps the ring smooth and
    azimuthally continuous; `s = 0` is no slash, `s = 1` a fully dark side.
    `xi` is the slash orientation in radians.
    """
    r0: float
    sigma: float
    s: float
    xi: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = ("r0", "sigma", "s", "xi", "x0", "y0")

    def _validate(self):
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("sigma", lambda v: v > 0, "sigma > 0")
        self._require("s", lambda v: (v >= 0) & (v <= 1), "0 <= s <= 1")

    def evaluate(self, x, y):
        ex = x - self.x0
        ey = y - self.y0
        r = radius(ex, ey)
        xr, yr = rotate(ex, ey, self.xi)
        n = _slash(self.s, azimuth(yr, xr))
        return n * jnp.exp(-((r - self.r0) ** 2) / (2.0 * self.sigma ** 2)) + DENSITY_FLOOR


@register_pytree_node_class
@dataclass(frozen=True)
class EllipticalGaussianRing(Filter):
    """
    Gaussian ring around an ellipse with asymmetry `tau` oriented at `xi`
    (radians, north of east).
    """
    r0: float
    sigma: float
    tau: float
    xi: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = ("r0", "sigma", "tau", "xi", "x0", "y0")

    def _validate(self):
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("sigma", lambda v: v > 0, "sigma > 0")
        self._require("tau", lambda v: (v >= 0) & (v < 1), "0 <= tau < 1")

    def evaluate(self, x, y):
        xr, yr = rotate(x - self.x0, y - self.y0, self.xi)
        a, b = _semi_axes(self.r0, self.tau)
        d2 = ellipse_sqdist(xr, yr, a, b)
        return jnp.exp(-d2 / (2.0 * self.sigma ** 2)) + DENSITY_FLOOR


@register_pytree_node_class
@dataclass(frozen=True)
class TIDAGaussianRing(Filter):
    """
    Elliptical ring with a slash tied to the ellipse axis.

    The slash and the semi-major axis are aligned when `s >= 0` and
    anti-aligned when `s < 0`; both share the orientation `xi`.
    """
    r0: float
    sigma: float
    tau: float
    s: float
    xi: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = ("r0", "sigma", "tau", "s", "xi", "x0", "y0")

    def _validate(self):
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("sigma", lambda v: v > 0, "sigma > 0")
        self._require("tau", lambda v: (v >= 0) & (v < 1), "0 <= tau < 1")
        self._require("s", lambda v: (v >= -1) & (v <= 1), "-1 <= s <= 1")

    def evaluate(self, x, y):
        xr, yr = rotate(x - self.x0, y - self.y0, self.xi)
        a, b = _semi_axes(self.r0, self.tau)
        d2 = ellipse_sqdist(xr, yr, a, b)

        phi = azimuth(yr, xr)
        s_pos = jnp.maximum(self.s, 0.0)
        s_neg = jnp.minimum(self.s, 0.0)
        aligned = _slash(s_pos, phi)
        # anti-aligned: rotate the slash a quarter turn onto the minor axis
        phi_anti = jnp.mod(phi + jnp.pi / 2, 2 * jnp.pi) - jnp.pi
        anti = (1.0 + s_neg * jnp.cos(phi_anti)) / (1.0 - s_neg)
        n = jnp.where(self.s >= 0, aligned, anti)

        return n * jnp.exp(-d2 / (2.0 * self.sigma ** 2)) + DENSITY_FLOOR


@register_pytree_node_class
@dataclass(frozen=True)
class GeneralGaussianRing(Filter):
    """
    Elliptical slashed ring where the ellipse orientation `xi_tau` and the
    slash orientation `xi_s` are independent.
    """
    r0: float
    sigma: float
    tau: float
    xi_tau: float
    s: float
    xi_s: float
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = (
        "r0", "sigma", "tau", "xi_tau", "s", "xi_s", "x0", "y0",
    )

    def _validate(self):
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("sigma", lambda v: v > 0, "sigma > 0")
        self._require("tau", lambda v: (v >= 0) & (v < 1), "0 <= tau < 1")
        self._require("s", lambda v: (v >= 0) & (v <= 1), "0 <= s <= 1")

    def evaluate(self, x, y):
        ex = x - self.x0
        ey = y - self.y0
        xr, yr = rotate(ex, ey, self.xi_tau)
        a, b = _semi_axes(self.r0, self.tau)
        d2 = ellipse_sqdist(xr, yr, a, b)

        xs, ys = rotate(ex, ey, self.xi_s)
        n = _slash(self.s, azimuth(ys, xs))

        return n * jnp.exp(-d2 / (2.0 * self.sigma ** 2)) + DENSITY_FLOOR
