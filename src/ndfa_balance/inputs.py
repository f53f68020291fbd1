from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

import numpy as np

# Column names of the field-trial table.
NDFA = "Ndfa"
PARTIAL_BALANCE = "PartialNBalance"
TOTAL_BALANCE = "TotalNBalance"


@dataclass(frozen=True)
class Observations:
    """Paired (Ndfa, balance) observations plus lightweight plotting metadata.

    ``x`` is the Ndfa value of each sample (raw percentage, 0-100) and ``y``
    the nitrogen balance (kg/ha). Order carries no meaning.
    """

    x: np.ndarray
    y: np.ndarray

    # Plotting metadata (optional)
    x_label: Optional[str] = NDFA
    y_label: Optional[str] = None
    label: Optional[str] = None

    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        x = np.asarray(self.x, dtype=float)
        y = np.asarray(self.y, dtype=float)
        if x.ndim != 1 or y.ndim != 1:
            raise ValueError("Observations require 1D x and y arrays.")
        if x.shape != y.shape:
            raise ValueError(
                f"x and y must have the same length; got {x.size} and {y.size}."
            )
        bad = ~(np.isfinite(x) & np.isfinite(y))
        if np.any(bad):
            raise ValueError(
                f"Observations contain non-finite values at rows {np.flatnonzero(bad).tolist()}."
            )
        # frozen dataclass: normalise arrays in place
        object.__setattr__(self, "x", x)
        object.__setattr__(self, "y", y)

    @property
    def n(self) -> int:
        return int(self.x.size)

    def __len__(self) -> int:
        return self.n

    @staticmethod
    def from_table(
        table: Any,
        *,
        y: str,
        x: str = NDFA,
        label: Optional[str] = None,
        meta: Optional[Mapping[str, Any]] = None,
    ) -> "Observations":
        """Build observations from two columns of a mapping-like table.

        Anything indexable by column name works: a dict of arrays, a
        ``pandas.DataFrame`` or a numpy structured array.
        """
        try:
            xs = table[x]
            ys = table[y]
        except (KeyError, ValueError, IndexError) as e:
            raise KeyError(f"Table has no column {e.args[0]!r}.") from e
        return Observations(
            x=np.asarray(xs, dtype=float),
            y=np.asarray(ys, dtype=float),
            x_label=x,
            y_label=y,
            label=label or y,
            meta=dict(meta or {}),
        )

    def take(self, idx: Any) -> "Observations":
        """Return the observations at ``idx`` (e.g. a bootstrap resample)."""
        idx = np.asarray(idx, dtype=int)
        return replace(self, x=self.x[idx], y=self.y[idx])

    def with_labels(
        self,
        *,
        x_label: Optional[str] = None,
        y_label: Optional[str] = None,
        label: Optional[str] = None,
    ) -> "Observations":
        """Return a copy with updated label fields."""
        return replace(
            self,
            x_label=self.x_label if x_label is None else x_label,
            y_label=self.y_label if y_label is None else y_label,
            label=self.label if label is None else label,
        )
