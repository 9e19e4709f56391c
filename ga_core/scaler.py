"""
Fitness scalers: applied to the raw fitness before selection sees it.
"""

from .phenotype import identity


class ExponentialScaler:
    """Scales a numeric fitness value x to (a*x + b)**c."""

    def __init__(self, a: float = 1.0, b: float = 0.0, c: float = 1.0):
        self.a = float(a)
        self.b = float(b)
        self.c = float(c)

    def __call__(self, value: float) -> float:
        return (self.a * float(value) + self.b) ** self.c

    def __eq__(self, other) -> bool:
        if not isinstance(other, ExponentialScaler):
            return NotImplemented
        return (self.a, self.b, self.c) == (other.a, other.b, other.c)

    def __hash__(self) -> int:
        return hash((self.a, self.b, self.c))

    def __repr__(self) -> str:
        return f"ExponentialScaler[a={self.a:f}, b={self.b:f}, c={self.c:f}]"


SQR_SCALER = ExponentialScaler(c=2.0)
SQRT_SCALER = ExponentialScaler(c=0.5)

__all__ = ["identity", "ExponentialScaler", "SQR_SCALER", "SQRT_SCALER"]
