"""Atom selections with a fixed number of atoms per match."""

from __future__ import annotations

import itertools
import re

from MDAnalysis.core.selection import Parser
from MDAnalysis.exceptions import SelectionError

from .errors import ConfigurationError
from .system import Frame

# context keyword -> number of atoms in each match
CONTEXTS = {
    "atoms": 1,
    "one": 1,
    "pairs": 2,
    "two": 2,
    "angles": 3,
    "three": 3,
    "dihedrals": 4,
    "four": 4,
}

_CONTEXT_RE = re.compile(r"^\s*([a-z]+)\s*:(.*)$", re.DOTALL)


class Selection:
    """
    Selection of atoms or atom tuples in a frame.

    The expression is either a plain MDAnalysis selection string (matching
    single atoms), or a context keyword followed by a colon and one
    MDAnalysis selection per atom of the tuple, separated by ``;``. A single
    selection after the keyword is used for every atom of the tuple.

    Example:
        >>> Selection("name O").arity
        1
        >>> Selection("pairs: name O; name H").parts
        ['name O', 'name H']

    Tuples never contain the same atom twice.
    """

    def __init__(self, expression: str) -> None:
        """
        Parse a selection expression.

        Args:
            expression: Selection string.

        Raises:
            ConfigurationError: If the expression is empty, the number of
                selections does not match the context, or a selection is not
                valid MDAnalysis syntax.
        """
        self.expression = expression
        match = _CONTEXT_RE.match(expression)
        if match is not None and match.group(1) in CONTEXTS:
            self.arity = CONTEXTS[match.group(1)]
            body = match.group(2)
        else:
            self.arity = 1
            body = expression

        parts = [part.strip() for part in body.split(";")]
        if any(not part for part in parts):
            raise ConfigurationError(f"empty selection in '{expression}'")
        if len(parts) == 1:
            parts = parts * self.arity
        if len(parts) != self.arity:
            raise ConfigurationError(
                f"selection '{expression}' needs {self.arity} atom selections, "
                f"got {len(parts)}"
            )
        for part in dict.fromkeys(parts):
            _check_syntax(part)
        self.parts = parts

        # universe reused while frames share the same topology
        self._topology = None
        self._universe = None

    def __repr__(self) -> str:
        return f"Selection({self.expression!r})"

    def __len__(self) -> int:
        return self.arity

    def match_list(self, frame: Frame) -> list[int]:
        """
        Get the indices of the atoms matching a single-atom selection.

        Args:
            frame: Frame to evaluate the selection on.

        Returns:
            Sorted atom indices.
        """
        if self.arity != 1:
            raise ConfigurationError(
                f"can not list atoms of selection '{self.expression}' with "
                f"{self.arity} atoms per match"
            )
        universe = self._universe_for(frame)
        return [int(i) for i in self._select(universe, self.parts[0])]

    def evaluate(self, frame: Frame) -> list[tuple[int, ...]]:
        """
        Get all atom tuples matching this selection.

        Args:
            frame: Frame to evaluate the selection on.

        Returns:
            List of tuples with ``arity`` atom indices each.
        """
        universe = self._universe_for(frame)
        groups = [self._select(universe, part) for part in self.parts]
        return [
            tuple(int(i) for i in match)
            for match in itertools.product(*groups)
            if len(set(match)) == self.arity
        ]

    def _universe_for(self, frame: Frame):
        if frame.topology is not self._topology:
            self._universe = frame.to_universe()
            self._topology = frame.topology
        else:
            self._universe.atoms.positions = frame.positions
            self._universe.dimensions = frame.cell.dimensions
        return self._universe

    def _select(self, universe, selection: str):
        try:
            return universe.select_atoms(selection).indices
        except (SelectionError, ValueError) as error:
            raise ConfigurationError(
                f"invalid selection '{selection}': {error}"
            ) from error


def _check_syntax(selection: str) -> None:
    """Parse ``selection`` without evaluating it on any atom."""
    try:
        Parser.parse(selection, {})
    except (SelectionError, ValueError) as error:
        raise ConfigurationError(
            f"invalid selection '{selection}': {error}"
        ) from error
