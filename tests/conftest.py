import pytest

from config import set_config


class Quantity(object):
    """Number-like wrapper with no native square root."""

    def __init__(self, value):
        self.value = value

    @staticmethod
    def _v(other):
        return other.value if isinstance(other, Quantity) else other

    def __add__(self, other):
        return Quantity(self.value + self._v(other))

    def __sub__(self, other):
        return Quantity(self.value - self._v(other))

    def __mul__(self, other):
        return Quantity(self.value * self._v(other))

    def __truediv__(self, other):
        return Quantity(self.value / self._v(other))

    def __eq__(self, other):
        return self.value == self._v(other)

    def __lt__(self, other):
        return self.value < self._v(other)

    def __le__(self, other):
        return self.value <= self._v(other)

    def __gt__(self, other):
        return self.value > self._v(other)

    def __ge__(self, other):
        return self.value >= self._v(other)

    def __float__(self):
        return float(self.value)

    def __repr__(self):
        return "Quantity(%r)" % (self.value,)


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    monkeypatch.delenv("RUNSTATS_CONFIG", raising=False)
    previous = set_config(None)
    yield
    set_config(previous)


@pytest.fixture
def quantity():
    return Quantity
