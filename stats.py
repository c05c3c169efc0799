"""Single pass mean, variance and standard deviation.

Every entry point takes any finite iterable. Native numbers are accumulated
as a numpy scalar type (``dtype``, float64 unless configured otherwise).
Number-like types that numpy knows nothing about (``int`` of any size,
``Decimal``, ``Fraction``, user wrappers) are accumulated in their own
arithmetic when a ``seed``, their equivalent of zero, is passed.

Insufficient data is not an error: an empty mean, or a variance of fewer
than three values, returns a "not available" value instead. That is ``nan``
for floating dtypes, ``0`` for integer dtypes and ``None`` for seeded
accumulations (the seed itself for an empty seeded mean).
"""
import logging

import numpy as np

from numeric import (
    coerce, divide, manual_sqrt, native_type, not_available, require_floating, sqrt_strategy,
)
from utils import has_length, peek

logger = logging.getLogger(__name__)

# giving the variance of one or two values is refused
MIN_VARIANCE_COUNT = 3


def _flatten(values):
    if isinstance(values, np.ndarray):
        return values.ravel()
    return values


class RunningMean(object):
    """Mean of values pushed one at a time.

    Native values use the Knuth & Welford update, one division per value:
    slower than summing, but it cannot overflow and loses less precision.
    Seeded values are summed and divided once at the end, as per value
    division would compound the rounding of integer-like types.
    """

    def __init__(self, seed=None, dtype=None):
        self.seed = seed
        self.dtype = native_type(dtype) if seed is None else None
        self.reset()

    def reset(self):
        self.k = 0
        if self.seed is None:
            self.total = None
            self._mean = self.dtype(0)
        else:
            self.total = self.seed

    @property
    def count(self):
        return self.k

    def push(self, x):
        if self.seed is None:
            x = coerce(x, self.dtype)
            self.k += 1
            self._mean = self._mean + divide(x - self._mean, self.k)
        else:
            self.k += 1
            self.total = self.total + x

    def update(self, values):
        for x in _flatten(values):
            self.push(x)
        return self

    @property
    def mean(self):
        if self.k == 0:
            return self.seed if self.seed is not None else not_available(self.dtype)
        if self.seed is None:
            return self._mean
        return divide(self.total, self.k)


class RunningVariance(object):
    """Mean and variance of values pushed one at a time (Welford's method).

    ``m2`` holds the running sum of squared deviations from the mean.
    ``variance(population=True)`` divides it by the number of values,
    ``variance()`` by one less.
    """

    def __init__(self, seed=None, dtype=None):
        self.seed = seed
        self.dtype = native_type(dtype) if seed is None else None
        self.reset()

    def reset(self):
        zero = self.dtype(0) if self.seed is None else self.seed
        self.mean = zero
        self.m2 = zero
        self.k = 0

    @property
    def count(self):
        return self.k

    def push(self, x):
        if self.seed is None:
            x = coerce(x, self.dtype)
        self.k += 1
        old_mean = self.mean
        self.mean = self.mean + divide(x - self.mean, self.k)
        self.m2 = self.m2 + (x - self.mean) * (x - old_mean)

    def update(self, values):
        for x in _flatten(values):
            self.push(x)
        return self

    def not_available(self):
        return not_available(self.dtype)

    def variance(self, population=False):
        if self.k < MIN_VARIANCE_COUNT:
            return self.not_available()

        # i is the 1-based position the next value would take
        i = self.k + 1
        if population:
            return divide(self.m2, i - 1)
        return divide(self.m2, i - 2)

    def standard_deviation(self, population=False):
        if self.seed is None:
            require_floating(self.dtype)
            return np.sqrt(self.variance(population))

        var = self.variance(population)
        if var is None:
            return None
        return manual_sqrt(var, self.seed)


def mean(values, seed=None, dtype=None):
    """Arithmetic mean of ``values`` in one pass.

    An empty input gives ``nan`` (or the dtype's zero), or ``seed`` when one
    is passed.
    """
    values = _flatten(values)
    if seed is not None and has_length(values):
        if len(values) == 0:
            return seed
        return divide(sum(values, seed), len(values))

    # forward-only values count while they are summed
    return RunningMean(seed=seed, dtype=dtype).update(values).mean


def _running_variance(values, seed, dtype):
    acc = RunningVariance(seed=seed, dtype=dtype)
    values = _flatten(values)

    if has_length(values):
        n = len(values)
        if n < MIN_VARIANCE_COUNT:
            logger.debug("variance needs %d values, got %d", MIN_VARIANCE_COUNT, n)
            return acc
    else:
        is_empty, values = peek(values)
        if is_empty:
            return acc

    return acc.update(values)


def variance(values, seed=None, population=False, dtype=None):
    """Sample variance of ``values``, population variance with ``population=True``.

    Fewer than three values give the "not available" value.
    """
    return _running_variance(values, seed, dtype).variance(population)


def standard_deviation(values, seed=None, population=False, dtype=None):
    """Square root of ``variance(values, seed, population, dtype)``.

    Native values need a floating ``dtype`` and use ``numpy.sqrt``. Seeded
    values use ``manual_sqrt`` in the seed's own arithmetic, so a zero
    variance has no standard deviation and gives ``None``.
    """
    if seed is None:
        require_floating(native_type(dtype))
    else:
        sqrt_strategy(seed)
    return _running_variance(values, seed, dtype).standard_deviation(population)
