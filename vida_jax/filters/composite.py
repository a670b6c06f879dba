# vida_jax/filters/composite.py
"""
Filter algebra.

- Sum(left, right):  density = left + right
- Scale(child, weight): density = weight * child

Filters are normalized before they are compared with an image, so a Scale
weight is a flux weight relative to the other terms of a Sum, not an absolute
unit. The flat layout of a composite is the concatenation of its children's
layouts in construction order, with a Scale weight appended after its child.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import ClassVar, List, Tuple

from jax.tree_util import register_pytree_node_class

from .base import Filter, FilterShape
from .codec import unpack


@register_pytree_node_class
@dataclass(frozen=True)
class Sum(Filter):
    """Sum of two filters. Nest Sums to hold any number of components."""
    left: Filter
    right: Filter

    param_names: ClassVar[Tuple[str, ...]] = ("left", "right")

    def evaluate(self, x, y):
        return self.left.evaluate(x, y) + self.right.evaluate(x, y)

    @property
    def shape(self) -> FilterShape:
        left, right = self.left.shape, self.right.shape
        return FilterShape(self.kind, left.size + right.size, children=(left, right))

    def split(self) -> List[Filter]:
        return [*self.left.split(), *self.right.split()]

    def labels(self) -> List[str]:
        return [*self.left.labels(), *self.right.labels()]

    @classmethod
    def from_flat(cls, p, shape: FilterShape) -> "Sum":
        left, right = shape.children
        return cls(unpack(p[:left.size], left), unpack(p[left.size:], right))


@register_pytree_node_class
@dataclass(frozen=True)
class Scale(Filter):
    """A filter multiplied by a non-negative relative flux `weight`."""
    child: Filter
    weight: float

    param_names: ClassVar[Tuple[str, ...]] = ("child", "weight")

    def _validate(self):
        self._require("weight", lambda v: v >= 0, "weight >= 0")

    def evaluate(self, x, y):
        return self.weight * self.child.evaluate(x, y)

    @property
    def shape(self) -> FilterShape:
        child = self.child.shape
        return FilterShape(self.kind, child.size + 1, children=(child,))

    def labels(self) -> List[str]:
        return [*self.child.labels(), f"{self.kind}.weight"]

    @classmethod
    def from_flat(cls, p, shape: FilterShape) -> "Scale":
        (child,) = shape.children
        return cls(unpack(p[:child.size], child), p[child.size])


def combine(a: Filter, b: Filter) -> Sum:
    """Add two filters."""
    return Sum(a, b)


def scale(f: Filter, weight) -> Scale:
    """Weight a filter by a relative flux."""
    return Scale(f, weight)


def stack(f: Filter, *others: Filter) -> Filter:
    """
    Combine several filters, giving every added component its own weight.

    The first filter is the reference (implicit weight 1); each of `others`
    is wrapped in `Scale(o, 1.0)` so its relative flux becomes a parameter.
    """
    if not others:
        return f
    return Sum(f, reduce(Sum, (Scale(o, 1.0) for o in others)))


def split(f: Filter) -> List[Filter]:
    """Flatten nested Sums into the ordered list of components."""
    return f.split()
