"""Fixed-width histogram used by binned analyses."""

from __future__ import annotations

from collections.abc import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray


class Histogram:
    """
    Fixed-width binned accumulator.

    Values outside ``[lower_bound, upper_bound)`` are silently dropped. The
    bounds are frozen at construction, the only mutations are insertions
    and :meth:`normalize`.

    Example:
        >>> histogram = Histogram(10, 0.0, 5.0)
        >>> histogram.insert_at(1.2)
        >>> histogram[2]
        1.0
    """

    def __init__(self, bin_count: int, lower_bound: float, upper_bound: float) -> None:
        """
        Create a histogram with zeroed bins.

        Args:
            bin_count: Number of bins.
            lower_bound: Lower edge of the first bin.
            upper_bound: Upper edge of the last bin.

        Raises:
            ValueError: If ``bin_count`` is not positive or the bounds are
                not increasing.
        """
        if bin_count <= 0:
            raise ValueError(f"bin_count must be positive, got {bin_count}")
        if not upper_bound > lower_bound:
            raise ValueError(
                f"upper_bound ({upper_bound}) must be greater than "
                f"lower_bound ({lower_bound})"
            )
        self._bin_count = int(bin_count)
        self._lower_bound = float(lower_bound)
        self._upper_bound = float(upper_bound)
        self._bin_size = (self._upper_bound - self._lower_bound) / self._bin_count
        self._bins = np.zeros(self._bin_count, dtype=np.float64)

    def __len__(self) -> int:
        return self._bin_count

    def __getitem__(self, index: int) -> float:
        return float(self._bins[index])

    def __repr__(self) -> str:
        return (
            f"Histogram({self._bin_count}, {self._lower_bound}, {self._upper_bound})"
        )

    @property
    def bin_count(self) -> int:
        """Number of bins."""
        return self._bin_count

    @property
    def lower_bound(self) -> float:
        """Lower edge of the first bin."""
        return self._lower_bound

    @property
    def upper_bound(self) -> float:
        """Upper edge of the last bin."""
        return self._upper_bound

    @property
    def bin_size(self) -> float:
        """Width of every bin."""
        return self._bin_size

    @property
    def bins(self) -> NDArray[np.floating]:
        """Copy of the current bin values."""
        return self._bins.copy()

    @property
    def left_edges(self) -> NDArray[np.floating]:
        """Lower edge of every bin."""
        return self._lower_bound + np.arange(self._bin_count) * self._bin_size

    @property
    def centers(self) -> NDArray[np.floating]:
        """Center of every bin."""
        return self.left_edges + 0.5 * self._bin_size

    def bin_index(self, value: float) -> int | None:
        """
        Index of the bin containing ``value``.

        Returns:
            ``floor((value - lower_bound) / bin_size)``, or None if ``value``
            is out of range.
        """
        if not self._lower_bound <= value < self._upper_bound:
            return None
        index = int(np.floor((value - self._lower_bound) / self._bin_size))
        # float rounding just below upper_bound
        return min(index, self._bin_count - 1)

    def insert_at(self, value: float) -> None:
        """Increment the bin containing ``value``, ignoring out of range values."""
        index = self.bin_index(value)
        if index is not None:
            self._bins[index] += 1

    def insert_many(self, values: ArrayLike) -> int:
        """
        Insert all ``values`` at once.

        Equivalent to calling :meth:`insert_at` for every value.

        Returns:
            Number of values that fell inside the histogram.
        """
        values = np.asarray(values, dtype=np.float64).ravel()
        values = values[(values >= self._lower_bound) & (values < self._upper_bound)]
        indices = np.floor((values - self._lower_bound) / self._bin_size).astype(np.int64)
        indices = np.minimum(indices, self._bin_count - 1)
        np.add.at(self._bins, indices, 1)
        return len(values)

    def normalize(self, function: Callable[[int, float], float]) -> None:
        """
        Replace every bin value by ``function(index, value)``.

        Calling this twice applies ``function`` to already normalized values.
        """
        for i in range(self._bin_count):
            self._bins[i] = function(i, float(self._bins[i]))

    def merge(self, other: Histogram) -> None:
        """
        Add the bins of ``other`` to this histogram.

        Only meaningful before normalization.

        Raises:
            ValueError: If the histograms do not share the same bins.
        """
        if (
            other.bin_count != self._bin_count
            or other.lower_bound != self._lower_bound
            or other.upper_bound != self._upper_bound
        ):
            raise ValueError(f"can not merge {other!r} into {self!r}")
        self._bins += other._bins
