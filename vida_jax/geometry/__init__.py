# vida_jax/geometry/__init__.py
from .rotation import rotate
from .ellipse import ellipse_sqdist
from .polar import radius, azimuth

__all__ = [
    "rotate",
    "ellipse_sqdist",
    "radius",
    "azimuth",
]
