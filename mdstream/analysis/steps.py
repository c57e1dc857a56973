"""Selection of trajectory steps to visit."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class StepRange:
    """
    Steps to use from a trajectory.

    A step ``s`` is visited iff ``start <= s <= end`` and
    ``(s - start) % stride == 0``.

    Attributes:
        start: First step.
        end: Last step (inclusive), None for the end of the trajectory.
        stride: Distance between visited steps.
    """

    start: int = 0
    end: int | None = None
    stride: int = 1

    def __post_init__(self) -> None:
        """Validate the range."""
        if self.start < 0:
            raise ValueError(f"steps start must be non-negative, got {self.start}")
        if self.end is not None:
            if self.end < 0:
                raise ValueError(f"steps end must be non-negative, got {self.end}")
            if self.start > self.end:
                raise ValueError(
                    f"steps start ({self.start}) is bigger than end ({self.end})"
                )
        if self.stride < 1:
            raise ValueError(f"steps stride must be at least 1, got {self.stride}")

    @classmethod
    def parse(cls, string: str) -> StepRange:
        """
        Parse a ``<start>:<end>[:<stride>]`` string.

        Every field is optional: ``":"`` uses all steps, ``"10:"`` skips the
        first ten and ``"::5"`` uses every fifth step.

        Raises:
            ValueError: If the string is malformed.
        """
        fields = string.split(":")
        if len(fields) not in (2, 3):
            raise ValueError(
                f"invalid steps '{string}', expected <start>:<end>[:<stride>]"
            )

        def parse_int(value: str, name: str) -> int | None:
            value = value.strip()
            if not value:
                return None
            try:
                return int(value)
            except ValueError:
                raise ValueError(
                    f"invalid {name} '{value}' in steps '{string}'"
                ) from None

        start = parse_int(fields[0], "start")
        end = parse_int(fields[1], "end")
        stride = parse_int(fields[2], "stride") if len(fields) == 3 else None
        return cls(
            start=0 if start is None else start,
            end=end,
            stride=1 if stride is None else stride,
        )

    def __contains__(self, step: int) -> bool:
        if step < self.start:
            return False
        if self.end is not None and step > self.end:
            return False
        return (step - self.start) % self.stride == 0

    def visit(self, n_steps: int) -> Iterator[int]:
        """Iterate over the visited steps of a trajectory with ``n_steps`` steps."""
        stop = n_steps if self.end is None else min(n_steps, self.end + 1)
        return iter(range(self.start, stop, self.stride))

    def as_slice(self, n_steps: int) -> tuple[int, int, int]:
        """Return ``(start, stop, step)`` for a trajectory with ``n_steps`` steps."""
        stop = n_steps if self.end is None else min(n_steps, self.end + 1)
        return min(self.start, stop), stop, self.stride
