# vida_jax/filters/codec.py
"""
Parameter codec: filter tree <-> flat parameter vector.

pack(f)              -> 1-D vector, depth-first, each kind in its declared
                        parameter order, Scale weights after their child
unpack(p, shape)     -> filter rebuilt from p and the static shape
shape_of(f)          -> the shape descriptor needed by unpack

Round-trip laws:
    pack(unpack(p, shape)) == p
    unpack(pack(f), shape_of(f)) evaluates identically to f

Both functions are traceable, so `unpack` can sit inside a jitted or
differentiated objective (validation is skipped for traced values).
"""
from __future__ import annotations

import jax.numpy as jnp
from jax.tree_util import tree_leaves

from ..errors import ParameterCountMismatch
from .base import Filter, FilterShape, get


def shape_of(f: Filter) -> FilterShape:
    return f.shape


def pack(f: Filter) -> jnp.ndarray:
    leaves = [jnp.ravel(jnp.asarray(leaf, dtype=float)) for leaf in tree_leaves(f)]
    if not leaves:
        return jnp.zeros((0,))
    return jnp.concatenate(leaves)


def unpack(p, shape: FilterShape) -> Filter:
    p = jnp.asarray(p, dtype=float)
    got = p.shape[0] if p.ndim == 1 else p.size
    if p.ndim != 1 or got != shape.size:
        raise ParameterCountMismatch(shape.kind, shape.size, got)
    return get(shape.kind).from_flat(p, shape)
