"""Forward-mode dual numbers with a fixed-size tangent vector."""

import numbers
from typing import List, Sequence, Union

import numpy as np


class Dual:
    """Scalar carrying a value and its gradient with respect to N inputs.

    Arithmetic on duals applies the chain rule to the gradient, so running a
    formula written against ordinary operators over duals yields the formula's
    value and its exact partial derivatives in one pass.

    The value is held as a numpy float64 so that division by zero produces
    inf/nan instead of raising, matching plain numpy scalars.
    """

    __slots__ = ("value", "grad")

    # Make numpy scalars defer to our reflected operators.
    __array_ufunc__ = None

    def __init__(self, value: float, grad: Union[np.ndarray, Sequence[float]]):
        self.value = np.float64(value)
        self.grad = np.asarray(grad, dtype=np.float64)

    @classmethod
    def constant(cls, value: float, size: int) -> "Dual":
        """Create a dual with zero gradient."""
        return cls(value, np.zeros(size))

    @classmethod
    def variable(cls, value: float, index: int, size: int) -> "Dual":
        """Create a dual seeded as the index-th of size independent inputs."""
        grad = np.zeros(size)
        grad[index] = 1.0
        return cls(value, grad)

    @property
    def size(self) -> int:
        return self.grad.shape[0]

    def __add__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value + other.value, self.grad + other.grad)
        if isinstance(other, numbers.Real):
            return Dual(self.value + other, self.grad)
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Dual):
            return Dual(self.value - other.value, self.grad - other.grad)
        if isinstance(other, numbers.Real):
            return Dual(self.value - other, self.grad)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, numbers.Real):
            return Dual(other - self.value, -self.grad)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Dual):
            return Dual(
                self.value * other.value,
                self.grad * other.value + other.grad * self.value,
            )
        if isinstance(other, numbers.Real):
            return Dual(self.value * other, self.grad * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Dual):
            return Dual(
                self.value / other.value,
                (self.grad * other.value - other.grad * self.value)
                / (other.value * other.value),
            )
        if isinstance(other, numbers.Real):
            other = np.float64(other)
            return Dual(self.value / other, self.grad / other)
        return NotImplemented

    def __rtruediv__(self, other):
        if isinstance(other, numbers.Real):
            other = np.float64(other)
            return Dual(
                other / self.value,
                -other * self.grad / (self.value * self.value),
            )
        return NotImplemented

    def __pow__(self, exponent):
        if isinstance(exponent, numbers.Real):
            return Dual(
                self.value ** exponent,
                exponent * self.value ** (exponent - 1) * self.grad,
            )
        return NotImplemented

    def __neg__(self):
        return Dual(-self.value, -self.grad)

    def __pos__(self):
        return self

    def __float__(self):
        raise TypeError(
            "Converting a Dual to float would discard its derivatives; "
            "use value_of() to read the value explicitly"
        )

    def sqrt(self) -> "Dual":
        root = np.sqrt(self.value)
        return Dual(root, self.grad / (2.0 * root))

    def sin(self) -> "Dual":
        return Dual(np.sin(self.value), np.cos(self.value) * self.grad)

    def cos(self) -> "Dual":
        return Dual(np.cos(self.value), -np.sin(self.value) * self.grad)

    def __repr__(self) -> str:
        return f"Dual(value={self.value!r}, grad={self.grad!r})"


def make_variables(values: Sequence[float]) -> List[Dual]:
    """Seed one dual per input value, each with a one-hot gradient.

    Args:
        values: Flat sequence of input values

    Returns:
        List of duals whose gradients span the identity matrix
    """
    values = np.asarray(values, dtype=np.float64).ravel()
    size = values.shape[0]
    return [Dual.variable(v, i, size) for i, v in enumerate(values)]


def gradient_of(x, size: int) -> np.ndarray:
    """Gradient of a dual, or zeros for a plain scalar."""
    if isinstance(x, Dual):
        if x.size != size:
            raise ValueError(f"Expected gradient of size {size}, got {x.size}")
        return x.grad.copy()
    return np.zeros(size)
