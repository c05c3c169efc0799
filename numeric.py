"""Numeric capabilities shared by the accumulators.

Element types are told apart by what they can do, not by what they are:
anything with ``<<`` and ``>>`` is treated as an integer, anything with
``-``, ``*``, ``/`` and ordering as a floating point number.
"""
import logging
import numbers
from typing import Protocol, runtime_checkable

import numpy as np

from config import get_config

logger = logging.getLogger(__name__)


class UnsupportedTypeError(TypeError):
    pass


@runtime_checkable
class IntegerLike(Protocol):
    def __lshift__(self, other): ...
    def __rshift__(self, other): ...


@runtime_checkable
class FloatLike(Protocol):
    def __sub__(self, other): ...
    def __mul__(self, other): ...
    def __truediv__(self, other): ...
    def __lt__(self, other): ...


def is_integer_like(x):
    # numpy scalars implement every operator slot, ask the dtype instead
    if isinstance(x, np.generic):
        return np.issubdtype(x.dtype, np.integer)
    return isinstance(x, IntegerLike)


def is_float_like(x):
    if isinstance(x, np.generic):
        return np.issubdtype(x.dtype, np.number)
    return isinstance(x, FloatLike)


def native_type(dtype=None):
    """Resolve ``dtype`` (or the configured default) to a numpy scalar type."""
    if dtype is None:
        dtype = get_config().dtype
    try:
        dt = np.dtype(dtype)
    except TypeError as e:
        raise UnsupportedTypeError("%r is not a numpy dtype" % (dtype,)) from e
    if not np.issubdtype(dt, np.number):
        raise UnsupportedTypeError("cannot accumulate values as %s" % dt)
    return dt.type


def require_floating(scalar_type):
    if not np.issubdtype(scalar_type, np.inexact):
        raise UnsupportedTypeError(
            "standard deviation needs a floating point dtype, got %s"
            % np.dtype(scalar_type))


def coerce(x, scalar_type):
    if not isinstance(x, numbers.Number):
        raise UnsupportedTypeError(
            "%s is not a number, pass a seed to accumulate it" % type(x).__name__)
    return scalar_type(x)


def not_available(scalar_type=None):
    """The "no result" value: nan for floating dtypes, zero for integer ones.

    Seeded accumulations have no way to build a nan of an arbitrary type,
    for them (``scalar_type=None``) it is ``None``.
    """
    if scalar_type is None:
        return None
    if np.issubdtype(scalar_type, np.inexact):
        return scalar_type(np.nan)
    return scalar_type(0)


def divide(value, count):
    """Divide by an element count without leaving the value's type.

    Integer-like values are truncated toward zero, so a negative deviation
    pulls a running mean exactly as far as a positive one pushes it.
    """
    if is_integer_like(value):
        zero = value - value
        if value < zero:
            return zero - (zero - value) // count
        return value // count
    return value / count


def sqrt_strategy(seed):
    """Pick the square root routine the seed's type can run, or refuse it."""
    if is_integer_like(seed):
        return _integer_sqrt
    if is_float_like(seed):
        return _newton_sqrt
    raise UnsupportedTypeError(
        "cannot take the square root of %s, it provides neither bit "
        "shifts nor division" % type(seed).__name__)


def manual_sqrt(x, seed, tolerance=None):
    """Square root of ``x`` using only the arithmetic of the seed's type.

    Integer-like seeds get an exact digit-by-digit root rounded to the
    nearest integer. Other number-like seeds get Newton-Raphson iteration,
    stopped once ``|guess**2 / x - 1| < tolerance``.

    Zero has no root here and yields ``None``.
    """
    root = sqrt_strategy(seed)

    if x == 0:
        return None
    if x == seed:
        return seed
    if x < seed:
        raise ValueError("math domain error")

    if root is _integer_sqrt:
        return _integer_sqrt(x, seed)
    if tolerance is None:
        tolerance = get_config().sqrt_tolerance
    return _newton_sqrt(x, seed, tolerance)


def _integer_sqrt(x, seed):
    op = x
    res = seed
    one = seed + 1

    # "one" starts at the highest power of four <= the argument, grown from
    # below so narrow numpy dtypes never overflow
    while one <= op >> 2:
        one <<= 2

    while one != seed:
        if op >= res + one:
            op = op - (res + one)
            res = (res >> 1) + one
        else:
            res >>= 1
        one >>= 2

    if op > res:
        res = res + 1
    return res


def _magnitude(x):
    if x < 0:
        return x * -1
    return x


def _newton_sqrt(x, seed, tolerance):
    guess = seed + 1
    steps = 0
    while _magnitude((guess * guess) / x - 1) >= tolerance:
        guess = ((x / guess) + guess) / 2
        steps += 1
    logger.debug("newton sqrt of %s converged after %d steps", x, steps)
    return guess
