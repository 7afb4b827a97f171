"""
Numeric backends the control code is generic over.

Every engine, strategy and stabilizer does its arithmetic through plain
operators, and asks a :class:`Numeric` backend only for the few things
operators cannot express: the additive/multiplicative identities, a cast
for configuration values, and the clamp used by anti-windup.

Backends
────────
* :class:`ScalarNumeric`: Python scalars. ``kind`` selects the
  representation: ``float`` (double precision), ``fractions.Fraction``
  (exact, a stand-in for fixed point) or ``decimal.Decimal``.
* :class:`TorchNumeric`: torch tensors of a given ``dtype`` (``float32`` for
  single precision, ``float64`` for double).  Values may be batched ``[N]``
  so one engine drives N vehicles in parallel; clamp is applied elementwise.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Union

import torch


class Numeric(ABC):
    """Capability set required from the control scalar."""

    @abstractmethod
    def zero(self) -> Any:
        """Additive identity."""

    @abstractmethod
    def one(self) -> Any:
        """Multiplicative identity."""

    @abstractmethod
    def cast(self, value: Any) -> Any:
        """Convert a configuration value into this representation."""

    @abstractmethod
    def clamp(self, value: Any, lo: Any, hi: Any) -> Any:
        """
        ``lo`` if ``value < lo``, ``hi`` if ``hi < value``, else ``value``.

        The lower bound is tested first, so with ``lo > hi`` the result is
        whichever bound the value crosses first; callers must not rely on it.
        """


class ScalarNumeric(Numeric):
    """Backend for Python scalar types (``float``, ``Fraction``, ``Decimal``)."""

    def __init__(self, kind: type = float) -> None:
        self.kind = kind

    def zero(self) -> Any:
        return self.kind(0)

    def one(self) -> Any:
        return self.kind(1)

    def cast(self, value: Any) -> Any:
        if isinstance(value, self.kind):
            return value
        if isinstance(value, float) and self.kind is not float:
            # Decimal(0.1) would keep the binary expansion
            return self.kind(str(value))
        return self.kind(value)

    def clamp(self, value: Any, lo: Any, hi: Any) -> Any:
        if value < lo:
            return lo
        if hi < value:
            return hi
        return value

    def __repr__(self) -> str:
        return f"ScalarNumeric({getattr(self.kind, '__name__', self.kind)})"


class TorchNumeric(Numeric):
    """Backend for (optionally batched) torch tensors."""

    def __init__(
        self,
        dtype: torch.dtype = torch.float32,
        device: Union[torch.device, str] = "cpu",
    ) -> None:
        self.dtype = dtype
        self.device = torch.device(device) if isinstance(device, str) else device

    def zero(self) -> torch.Tensor:
        return torch.zeros((), dtype=self.dtype, device=self.device)

    def one(self) -> torch.Tensor:
        return torch.ones((), dtype=self.dtype, device=self.device)

    def cast(self, value: Any) -> torch.Tensor:
        return torch.as_tensor(value, dtype=self.dtype, device=self.device)

    def clamp(self, value: Any, lo: Any, hi: Any) -> torch.Tensor:
        # torch.clamp picks ``hi`` when lo > hi; keep the lower-bound-first rule
        value = self.cast(value)
        lo = self.cast(lo)
        hi = self.cast(hi)
        return torch.where(value < lo, lo, torch.where(hi < value, hi, value))

    def __repr__(self) -> str:
        return f"TorchNumeric({self.dtype}, {self.device})"


FLOAT64 = ScalarNumeric(float)
