# vida_jax/filters/cosine.py
"""
CosineRing: the most flexible ring template.

The ring is elliptical (asymmetry `tau`, orientation `xi_tau`) and both its
thickness and its brightness vary with azimuth through truncated cosine series:

    sigma(phi) = sigma[0] + sum_{i=1..N} sigma[i] cos(i (phi - xi_sigma[i-1]))
    n(phi)     = 1        - sum_{i=1..M} s[i-1]  cos(i (phi - xi_s[i-1]))

The zero-order slash term is fixed to 1, so `M` counts only the extra terms.
The density is |n| * exp(-d^2 / (2 sigma^2 + 1e-2)), where d is the distance to
the ellipse; the small constant keeps the exponent finite when the thickness
series crosses zero.

Flat layout (length 2N + 2M + 6):

    r0, sigma[0..N], xi_sigma[0..N-1], tau, xi_tau, s[0..M-1], xi_s[0..M-1], x0, y0
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple

import jax.numpy as jnp
from jax.tree_util import register_pytree_node_class

from ..constants import COSINE_RING_EPS, DENSITY_FLOOR
from ..errors import InvalidParameter
from ..geometry import azimuth, ellipse_sqdist, rotate
from .base import Filter, FilterShape


def cosine_ring_size(N: int, M: int) -> int:
    return 5 + (N + 1) + N + 2 * M


@register_pytree_node_class
@dataclass(frozen=True, eq=False)
class CosineRing(Filter):
    """
    Elliptical ring with an N-term cosine thickness and an M-term cosine slash.

    `N = len(xi_sigma)` and `M = len(s)` are fixed at construction and are part
    of the filter's shape.
    """
    r0: float
    sigma: jnp.ndarray
    xi_sigma: jnp.ndarray
    tau: float
    xi_tau: float
    s: jnp.ndarray
    xi_s: jnp.ndarray
    x0: float
    y0: float

    param_names: ClassVar[Tuple[str, ...]] = (
        "r0", "sigma", "xi_sigma", "tau", "xi_tau", "s", "xi_s", "x0", "y0",
    )

    def __post_init__(self):
        for name in ("sigma", "xi_sigma", "s", "xi_s"):
            object.__setattr__(self, name, jnp.atleast_1d(jnp.asarray(getattr(self, name), dtype=float)))
        super().__post_init__()

    def _validate(self):
        if self.xi_sigma.ndim != 1:
            raise InvalidParameter(self.kind, "xi_sigma", self.xi_sigma, "a 1-D array of N angles")
        N, M = self.order
        if self.sigma.ndim != 1 or self.sigma.shape[0] != N + 1:
            raise InvalidParameter(self.kind, "sigma", self.sigma, f"length N + 1 = {N + 1}")
        if self.s.ndim != 1 or self.xi_s.ndim != 1 or self.xi_s.shape[0] != M:
            raise InvalidParameter(self.kind, "xi_s", self.xi_s, f"length M = {M}")
        self._require("r0", lambda v: v > 0, "r0 > 0")
        self._require("sigma", lambda v: v[0] > 0, "sigma[0] > 0")
        self._require("tau", lambda v: (v >= 0) & (v < 1), "0 <= tau < 1")

    @property
    def order(self) -> Tuple[int, int]:
        return int(self.xi_sigma.shape[0]), int(self.s.shape[0])

    @property
    def shape(self) -> FilterShape:
        N, M = self.order
        return FilterShape(self.kind, cosine_ring_size(N, M), meta=(N, M))

    def labels(self):
        N, M = self.order
        out = [f"{self.kind}.r0"]
        out += [f"{self.kind}.sigma[{i}]" for i in range(N + 1)]
        out += [f"{self.kind}.xi_sigma[{i}]" for i in range(N)]
        out += [f"{self.kind}.tau", f"{self.kind}.xi_tau"]
        out += [f"{self.kind}.s[{i}]" for i in range(M)]
        out += [f"{self.kind}.xi_s[{i}]" for i in range(M)]
        out += [f"{self.kind}.x0", f"{self.kind}.y0"]
        return out

    @classmethod
    def from_flat(cls, p, shape: FilterShape) -> "CosineRing":
        N, M = shape.meta
        return cls(
            r0=p[0],
            sigma=p[1:N + 2],
            xi_sigma=p[N + 2:2 * N + 2],
            tau=p[2 * N + 2],
            xi_tau=p[2 * N + 3],
            s=p[2 * N + 4:2 * N + 4 + M],
            xi_s=p[2 * N + 4 + M:2 * N + 4 + 2 * M],
            x0=p[2 * N + 4 + 2 * M],
            y0=p[2 * N + 5 + 2 * M],
        )

    def evaluate(self, x, y):
        N, M = self.order
        ex = x - self.x0
        ey = y - self.y0
        phi = azimuth(-ey, -ex)

        xr, yr = rotate(ex, ey, self.xi_tau)
        q = jnp.sqrt(1.0 - self.tau)
        d2 = ellipse_sqdist(xr, yr, self.r0 / q, self.r0 * q)

        n = 1.0
        for i in range(M):
            n = n - self.s[i] * jnp.cos((i + 1) * (phi - self.xi_s[i]))

        width = self.sigma[0]
        for i in range(N):
            width = width + self.sigma[i + 1] * jnp.cos((i + 1) * (phi - self.xi_sigma[i]))

        return jnp.abs(n) * jnp.exp(-d2 / (2.0 * width ** 2 + COSINE_RING_EPS)) + DENSITY_FLOOR
