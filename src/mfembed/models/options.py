"""
Options: hyper-parameters of a factor model.

Options are immutable after construction and persisted verbatim with the
factor store, so a reloaded model continues with the same learning rate,
regularization and momentum unless the caller overrides them.

Float fields are rounded to float32 on construction. The persisted layout
stores them as float32, so rounding up front makes a save/load round trip
reproduce the options bit-for-bit.
"""

import math
import numpy as np
from dataclasses import dataclass, fields, replace as dataclass_replace
from typing import Optional, Dict, Any

from ..config import EMBED_CONFIG, TRAINING_CONFIG


INT32_MAX = np.iinfo(np.int32).max


def _as_float32(value: float) -> float:
    return float(np.float32(value))


def _as_int32(name: str, value) -> int:
    try:
        is_integer = not isinstance(value, bool) and int(value) == value
    except (TypeError, ValueError, OverflowError):
        is_integer = False
    if not is_integer:
        raise ValueError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value > INT32_MAX:
        raise ValueError(f"{name} must be at most {INT32_MAX}, got {value}")
    return value


@dataclass(frozen=True)
class Options:
    """
    Configuration bundle for initialization and training.

    Attributes:
        dim: Factor vector length (≥ 1). Fixed for the lifetime of a store.
        r1: L2 regularization weight on row factors (≥ 0)
        r2: L2 regularization weight on column factors (≥ 0)
        mom: Momentum coefficient in [0, 1); 0 means plain SGD
        eps: Learning rate (> 0)
        init: Multiplier on the data-derived initialization scale (> 0)
        min: Fixed global minimum offset, or None to detect it from data
        th: Stop training once the epoch RMSE drops below this (≥ 0)
        maxit: Maximum number of epochs (≥ 0, 0 = unbounded)

    Example:
        >>> opts = Options(dim=20, eps=0.005)
        >>> opts.replace(mom=0.0).mom
        0.0
    """
    dim: int = EMBED_CONFIG["dim"]
    r1: float = EMBED_CONFIG["r1"]
    r2: float = EMBED_CONFIG["r2"]
    mom: float = EMBED_CONFIG["mom"]
    eps: float = EMBED_CONFIG["eps"]
    init: float = EMBED_CONFIG["init"]
    min: Optional[float] = EMBED_CONFIG["min"]
    th: float = TRAINING_CONFIG["th"]
    maxit: int = TRAINING_CONFIG["maxit"]

    def __post_init__(self):
        for name in ('r1', 'r2', 'mom', 'eps', 'init', 'th'):
            object.__setattr__(self, name, _as_float32(getattr(self, name)))
        object.__setattr__(self, 'dim', _as_int32('dim', self.dim))
        object.__setattr__(self, 'maxit', _as_int32('maxit', self.maxit))
        if self.min is not None:
            if math.isnan(self.min):
                object.__setattr__(self, 'min', None)
            else:
                object.__setattr__(self, 'min', _as_float32(self.min))

        for name in ('r1', 'r2', 'eps', 'init'):
            if math.isinf(getattr(self, name)):
                raise ValueError(f"{name} must be finite, got {getattr(self, name)}")
        if self.dim < 1:
            raise ValueError(f"dim must be positive, got {self.dim}")
        if not self.r1 >= 0:
            raise ValueError(f"r1 must be non-negative, got {self.r1}")
        if not self.r2 >= 0:
            raise ValueError(f"r2 must be non-negative, got {self.r2}")
        if not 0 <= self.mom < 1:
            raise ValueError(f"mom must be in [0, 1), got {self.mom}")
        if not self.eps > 0:
            raise ValueError(f"eps must be positive, got {self.eps}")
        if not self.init > 0:
            raise ValueError(f"init must be positive, got {self.init}")
        if self.min is not None and math.isinf(self.min):
            raise ValueError(f"min must be finite, got {self.min}")
        if not self.th >= 0:
            raise ValueError(f"th must be non-negative, got {self.th}")
        if self.maxit < 0:
            raise ValueError(f"maxit must be non-negative, got {self.maxit}")

    def replace(self, **changes) -> 'Options':
        """Return a validated copy with some fields changed."""
        return dataclass_replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, params: Dict[str, Any]) -> 'Options':
        """Build Options from a mapping, ignoring unknown keys and None values."""
        known = {f.name for f in fields(cls)}
        return cls(**{
            key: value for key, value in params.items()
            if key in known and (value is not None or key == 'min')
        })
