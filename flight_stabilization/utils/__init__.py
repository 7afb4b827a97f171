from .numeric import (
    Numeric,
    ScalarNumeric,
    TorchNumeric,
    FLOAT64,
)

__all__ = [
    "Numeric",
    "ScalarNumeric",
    "TorchNumeric",
    "FLOAT64",
]
