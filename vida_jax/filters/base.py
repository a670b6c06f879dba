# vida_jax/filters/base.py
"""
Filter base class, shape descriptor and kind registry.

Design principles
-----------------
- A filter is an immutable value: a frozen dataclass whose fields are its
  named scalar (or vector) parameters, registered as a JAX pytree.
- `evaluate(x, y)` is pure and strictly positive; it broadcasts over array
  coordinates, so the same filter can be sampled at a point or on a grid.
- The flat parameter layout of a kind is its static `param_names` schema; the
  pytree leaves are emitted in exactly that order.
- Construction validates concrete parameters. Instances rebuilt by JAX from
  traced leaves (inside jit/grad) bypass validation through `tree_unflatten`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, ClassVar, List, Tuple

import jax
import numpy as np

from ..errors import InvalidParameter


_REGISTRY = {}


def register(name, cls):
    """Register a filter class under its kind tag."""
    if name in _REGISTRY:
        raise KeyError(f"Filter kind '{name}' already registered.")
    _REGISTRY[name] = cls


def get(name):
    """Retrieve a filter class by kind tag."""
    try:
        return _REGISTRY[name]
    except KeyError:
        raise KeyError(
            f"Unknown filter kind '{name}'. "
            f"Available: {list(_REGISTRY.keys())}"
        )


@dataclass(frozen=True)
class FilterShape:
    """
    Type information needed to rebuild a filter from a flat vector.

    kind: registered kind tag
    size: number of flat parameters
    children: shapes of sub-filters (composites only)
    meta: static construction data ((N, M) for CosineRing, the template for
          ImageFilter)
    """
    kind: str
    size: int
    children: Tuple["FilterShape", ...] = ()
    meta: Tuple[Any, ...] = ()


def is_traced(value) -> bool:
    return isinstance(value, jax.core.Tracer)


class Filter:
    """
    Base class of all filter kinds.

    Subclasses define `param_names`, `evaluate` and, where needed, `_validate`,
    `shape` and `from_flat`.
    """
    param_names: ClassVar[Tuple[str, ...]] = ()

    def __post_init__(self):
        self._validate()

    def _validate(self):
        pass

    def _require(self, field: str, predicate: Callable[[np.ndarray], Any], requirement: str):
        value = getattr(self, field)
        if is_traced(value):
            return
        try:
            ok = bool(np.all(predicate(np.asarray(value, dtype=float))))
        except (TypeError, ValueError):
            ok = False
        if not ok:
            raise InvalidParameter(self.kind, field, value, requirement)

    # -- evaluation --------------------------------------------------------

    def evaluate(self, x, y):
        raise NotImplementedError

    def __call__(self, x, y):
        return self.evaluate(x, y)

    # -- structure ---------------------------------------------------------

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    def shape(self) -> FilterShape:
        return FilterShape(self.kind, len(self.param_names))

    @property
    def size(self) -> int:
        return self.shape.size

    def split(self) -> List["Filter"]:
        return [self]

    def labels(self) -> List[str]:
        return [f"{self.kind}.{name}" for name in self.param_names]

    @classmethod
    def from_flat(cls, p, shape: FilterShape) -> "Filter":
        return cls(*(p[i] for i in range(shape.size)))

    # -- pytree ------------------------------------------------------------

    def tree_flatten(self):
        return tuple(getattr(self, name) for name in self.param_names), None

    @classmethod
    def tree_unflatten(cls, aux, children):
        obj = object.__new__(cls)
        for name, value in zip(cls.param_names, children):
            object.__setattr__(obj, name, value)
        return obj
