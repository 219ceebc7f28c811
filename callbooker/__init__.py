"""Expert call booker: finds marketplace experts and books calls in the caller's availability."""

__version__ = "1.0.0"
