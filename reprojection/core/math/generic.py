"""Elementary functions that work on any scalar type used by the residual models.

Plain floats and numpy scalars go through numpy. Other numeric types plug in
with ``register``, e.g. ``sqrt.register(MyJet, lambda x: x.sqrt())``.
"""

from functools import singledispatch

import numpy as np

from .dual import Dual


@singledispatch
def sqrt(x):
    return np.sqrt(x)


@sqrt.register
def _(x: Dual):
    return x.sqrt()


@singledispatch
def sin(x):
    return np.sin(x)


@sin.register
def _(x: Dual):
    return x.sin()


@singledispatch
def cos(x):
    return np.cos(x)


@cos.register
def _(x: Dual):
    return x.cos()


@singledispatch
def value_of(x):
    """Primal value of a scalar, with any derivative part dropped."""
    return x


@value_of.register
def _(x: Dual):
    return x.value
