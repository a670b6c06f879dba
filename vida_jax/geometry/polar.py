"""
Polar coordinates with finite gradients at the origin.

A template evaluated exactly at its own center (a pixel center on an odd grid,
a centered initial guess) would otherwise differentiate sqrt and arctan2 at
(0, 0), which yields NaN.
"""
import jax.numpy as jnp

from ..constants import SQRT_EPS


def radius(x, y):
    """sqrt(x^2 + y^2), offset by SQRT_EPS so the gradient at the origin is zero."""
    return jnp.sqrt(x * x + y * y + SQRT_EPS)


def azimuth(y, x):
    """arctan2(y, x), defined as 0 at the origin with a zero gradient there."""
    origin = (x == 0) & (y == 0)
    x_safe = jnp.where(origin, 1.0, x)
    return jnp.where(origin, 0.0, jnp.arctan2(y, x_safe))
