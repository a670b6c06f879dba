# vida_jax/geometry/rotation.py
import jax.numpy as jnp


def rotate(x, y, xi):
    """
    Rotate the point(s) (x, y) by pi - xi.

    Position angles follow the astronomer convention (measured north of
    east), so a template oriented at `xi` is brought onto the x axis.
    Broadcasts over array inputs.
    """
    angle = jnp.pi - xi
    s = jnp.sin(angle)
    c = jnp.cos(angle)
    return c * x - s * y, s * x + c * y
