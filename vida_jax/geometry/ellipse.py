# vida_jax/geometry/ellipse.py
"""
Squared distance from a point to an axis-aligned ellipse.

There is no closed form for the distance to an ellipse, so the nearest point
is found iteratively. The point is folded into the first quadrant and the
nearest point is parametrized on the unit circle as (tx, ty), i.e. the ellipse
point is (a*tx, b*ty). Each step approximates the ellipse locally by a circle
centered on its evolute:

    e  = ((a^2 - b^2) tx^3 / a, (b^2 - a^2) ty^3 / b)     (evolute point)
    r  = |(a tx, b ty) - e|                               (radius of curvature)
    q  = p - e
    t' = normalize(clamp((q r/|q| + e) / (a, b), 0, 1))

Iteration stops once the unit parameter moves less than `eps`, or after
`max_iter` steps. Points stop updating individually, so a batch of points gives
the same answer as evaluating each point on its own. Non-convergence is not an
error: the last iterate is used.

Reference: https://github.com/0xfaded/ellipse_demo/issues/1#issuecomment-405078823
"""
from __future__ import annotations

import jax.numpy as jnp
from jax import lax

from ..constants import ELLIPSE_EPS, ELLIPSE_MAX_ITER, ELLIPSE_T0, SQRT_EPS


def _unit_step(px, py, tx, ty, a, b):
    """One refinement of the unit-circle parameter of the nearest point."""
    xe = a * tx
    ye = b * ty

    ex = (a * a - b * b) * tx * tx * tx / a
    ey = (b * b - a * a) * ty * ty * ty / b

    rx = xe - ex
    ry = ye - ey
    qx = px - ex
    qy = py - ey

    r = jnp.sqrt(rx * rx + ry * ry)
    q = jnp.sqrt(qx * qx + qy * qy + SQRT_EPS)

    xx = jnp.clip((qx * r / q + ex) / a, 0.0, 1.0)
    yy = jnp.clip((qy * r / q + ey) / b, 0.0, 1.0)
    t = jnp.sqrt(xx * xx + yy * yy + SQRT_EPS)
    # at the center the projection is undefined; keep the current iterate
    keep = (xx + yy) <= 0
    return jnp.where(keep, tx, xx / t), jnp.where(keep, ty, yy / t)


def ellipse_sqdist(x, y, a, b, eps: float = ELLIPSE_EPS, max_iter: int = ELLIPSE_MAX_ITER):
    """
    Minimum squared distance between (x, y) and the ellipse x^2/a^2 + y^2/b^2 = 1.

    Parameters
    ----------
    x, y : array_like
        Point coordinates in the ellipse frame. Broadcast against each other
        and against `a`, `b`.
    a, b : array_like
        Semi-axes along x and y.
    eps : float
        Convergence threshold on the displacement of the unit parameter.
    max_iter : int
        Maximum number of refinement steps (static).

    Returns
    -------
    jnp.ndarray
        Squared distance, accurate to roughly `eps` relative to the axes.
    """
    px = jnp.abs(x)
    py = jnp.abs(y)
    shape = jnp.broadcast_shapes(jnp.shape(px), jnp.shape(py), jnp.shape(a), jnp.shape(b))
    dtype = jnp.result_type(px, py, a, b, float)

    def body(_, carry):
        tx, ty, err = carry
        tx_new, ty_new = _unit_step(px, py, tx, ty, a, b)
        step = jnp.sqrt((tx - tx_new) ** 2 + (ty - ty_new) ** 2)
        active = err > eps
        return (
            jnp.where(active, tx_new, tx),
            jnp.where(active, ty_new, ty),
            jnp.where(active, step, err),
        )

    init = (
        jnp.full(shape, ELLIPSE_T0, dtype=dtype),
        jnp.full(shape, ELLIPSE_T0, dtype=dtype),
        jnp.ones(shape, dtype=dtype),
    )
    tx, ty, _ = lax.fori_loop(0, max_iter, body, init)

    dx = a * tx - px
    dy = b * ty - py
    return dx * dx + dy * dy
