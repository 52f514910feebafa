"""Error accumulation for best-effort bundle runs."""

from .accumulator import ErrorAccumulator

__all__ = [
    "ErrorAccumulator",
]
