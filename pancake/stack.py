"""
A stack of pancakes which may only be rearranged by flipping a prefix, and a procedure for sorting it.

The stack is held as a permutation pi of [0, n) (see permutations.rank), where pi[0] is the top of the stack. The
sorting procedure follows Gates & Papadimitriou: look at the top pancake t, find where t + 1 and t - 1 are, and
flip so that t lands next to one of them, growing runs of consecutive values ("blocks") until a single run remains.
Throughout, positions and values are both read circularly, so the procedure actually finishes with the stack in
order up to rotation and reversal, and a few extra flips at the end bring 0 to the top.

Vocabulary, for a value v in the stack:
- v is *free* if neither of its two (circular) positional neighbours is value-adjacent to it.
- v *starts a block* if the pancake above it is not value-adjacent, but the one below is.
- v *ends a block* if the pancake below it is not value-adjacent, but the one above is. The bottom of the stack
  always ends a block.
"""
from __future__ import annotations

import dataclasses
from typing import Iterable, List, Literal

import numpy as np
import numpy.typing as npt
import pandas as pd

from . import permutations


class ValueNotFoundError(LookupError):
    """Raised when asking about a value which is not in the stack."""


class NotInBlockError(ValueError):
    """Raised when asking for the block of a free value."""


class LogicError(AssertionError):
    """
    The sorting procedure reached a state which its case analysis says cannot happen. This is a bug, not bad
    input, and the sort does not try to recover from it.
    """


Phase = Literal['merge', 'rotate', 'manual']


@dataclasses.dataclass(frozen=True)
class FlipRecord:
    flip: int               # Flip number, starting from 1.
    value: int              # The value the flip was asked for.
    position: int           # Last index reversed, or -1 if nothing was.
    length: int             # Number of pancakes reversed.
    adjacencies: int        # count_adjacencies() after the flip.
    phase: Phase            # Which part of the procedure asked for the flip.


HISTORY_COLUMNS = [field.name for field in dataclasses.fields(FlipRecord)]


class PancakeStack:
    def __init__(self, values: Iterable[int]):
        self._pi = permutations.rank(values)
        assert permutations.is_permutation(self._pi)
        self._flips = 0
        self._history: List[FlipRecord] = []
        self._phase: Phase = 'manual'

    @property
    def n(self) -> int:
        return len(self._pi)

    @property
    def flips(self) -> int:
        """The number of flips performed so far."""
        return self._flips

    @property
    def pi(self) -> npt.NDArray[np.int64]:
        """
        The current stack, top first. This is a read-only view onto the stack rather than a copy, so it follows
        later flips.
        """
        view = self._pi.view()
        view.flags.writeable = False
        return view

    def __len__(self):
        return self.n

    def __str__(self):
        return ' '.join(str(x) for x in self._pi)

    def __repr__(self):
        return f"PancakeStack({self._pi.tolist()})"

    def is_sorted(self) -> bool:
        return permutations.is_identity(self._pi)

    def history(self) -> pd.DataFrame:
        """A table of every flip performed so far, one row per flip, in the order they happened."""
        return pd.DataFrame(
            columns=HISTORY_COLUMNS,
            data=[dataclasses.astuple(record) for record in self._history],
        )

    # Navigation ----------------------------------------------------------------------------------------------------

    def _wrap(self, index: int) -> int:
        return permutations.wrap(index, self.n)

    def _position(self, value: int) -> int:
        found = np.flatnonzero(self._pi == value)
        if len(found) == 0:
            raise ValueNotFoundError(f"{value} not found in stack {self}")

        return int(found[0])

    def _next(self, position: int) -> int:
        return self._wrap(position + 1)

    def _neighbours(self, position: int) -> tuple[int, int]:
        """The values above and below the given position, wrapping around the ends of the stack."""
        return int(self._pi[self._wrap(position - 1)]), int(self._pi[self._next(position)])

    def _adjacent(self, a: int, b: int) -> bool:
        return permutations.is_value_adjacent(a, b, self.n)

    # Queries -------------------------------------------------------------------------------------------------------

    def is_free(self, value: int) -> bool:
        before, after = self._neighbours(self._position(value))
        return not self._adjacent(value, before) and not self._adjacent(value, after)

    def starts_block(self, value: int) -> bool:
        before, after = self._neighbours(self._position(value))
        return not self._adjacent(value, before) and self._adjacent(value, after)

    def ends_block(self, value: int) -> bool:
        position = self._position(value)
        if position == self.n - 1:
            return True

        before, after = self._neighbours(position)
        return not self._adjacent(value, after) and self._adjacent(value, before)

    def last_element_in_block(self, value: int) -> int:
        """
        Walk down the stack from value (wrapping from the bottom to the top) until reaching a value which ends a
        block, and return that value.
        """
        if self.is_free(value):
            raise NotInBlockError(f"{value} is not part of a block in stack {self}")

        position = self._position(value)
        while not self.ends_block(int(self._pi[position])):
            position = self._next(position)

        return int(self._pi[position])

    def count_adjacencies(self) -> int:
        return permutations.count_adjacencies(self._pi)

    # Flips ---------------------------------------------------------------------------------------------------------

    def _flip_through(self, position: int, value: int):
        """
        Reverse pi[0], ..., pi[position]. A position of -1 reverses nothing, but is still counted as a flip.
        """
        prefix = self._pi[:position + 1]
        prefix[:] = prefix[::-1].copy()

        self._flips += 1
        self._history.append(FlipRecord(
            flip=self._flips,
            value=value,
            position=position,
            length=position + 1,
            adjacencies=self.count_adjacencies(),
            phase=self._phase,
        ))

    def flip_after(self, value: int):
        """Flip the part of the stack from the top down to and including value."""
        self._flip_through(self._position(value), int(value))

    def flip_before(self, value: int):
        """Flip the part of the stack strictly above value, so that the new top lands on value."""
        self._flip_through(self._position(value) - 1, int(value))

    # Sorting -------------------------------------------------------------------------------------------------------

    def sort(self):
        """
        Sort the stack in place, so that pi reads 0, 1, ..., n-1 from the top. The number of flips used is
        available afterwards from the flips property.

        The merging steps do not always make progress: on some stacks they come back round to a stack they have
        already seen, and on others they reach a case they cannot handle. Both raise LogicError rather than
        running forever or carrying on from a bad state.
        """
        self._phase = 'merge'
        seen = set()
        try:
            while self.count_adjacencies() < self.n - 1:
                state = tuple(self._pi.tolist())
                if state in seen:
                    raise LogicError(f"Stack {self} repeated after {self._flips} flips without being sorted")
                seen.add(state)

                t = int(self._pi[0])
                if self.is_free(t):
                    self._merge_free(t)
                else:
                    self._merge_block(t)

            self._phase = 'rotate'
            self._rotate_into_place()
        finally:
            self._phase = 'manual'

    def _join_neighbour(self, t: int) -> bool:
        """
        If t + 1 or t - 1 is free, or starts a block, flip the top value t onto it. Free values are preferred over
        block starts, and t + 1 over t - 1. Returns whether a flip was made.
        """
        up, down = self._wrap(t + 1), self._wrap(t - 1)
        for query in (self.is_free, self.starts_block):
            for target in (up, down):
                if query(target):
                    self.flip_before(target)
                    return True

        return False

    def _merge_free(self, t: int):
        """One step of the procedure when the top value t is free."""
        if self._join_neighbour(t):
            return

        up, down = self._wrap(t + 1), self._wrap(t - 1)
        if not (self.ends_block(up) and self.ends_block(down)):
            raise LogicError(f"Free value {t} on top has no neighbouring value to join in stack {self}")

        # Both t + 1 and t - 1 sit at the bottom of their blocks: bring t under the lower one, then under the higher.
        earlier, later = sorted((up, down), key=self._position)
        self.flip_after(later)
        self.flip_before(t)
        self.flip_after(earlier)
        self.flip_before(t)

    def _merge_block(self, t: int):
        """One step of the procedure when the top value t belongs to a block."""
        if self._join_neighbour(t):
            return

        # The block on top reads t, t + o, ..., t + ko.
        last = self.last_element_in_block(t)
        k = abs(t - last)
        o = 1 if t < last else -1

        behind = self._wrap(t - o)
        block_end = self._wrap(t + k * o)
        beyond = self._wrap(t + (k + 1) * o)

        if self.last_element_in_block(behind) != behind:
            raise LogicError(f"Expected {behind} to end its block when {t} is on top of stack {self}")

        if self.is_free(beyond):
            if self._position(beyond) > self._position(behind):
                self.flip_after(beyond)
                self.flip_before(block_end)
                self.flip_after(behind)
                self.flip_before(t)
            else:
                self.flip_after(beyond)
                self.flip_before(block_end)
                self.flip_after(t)
                self.flip_before(behind)
        elif self.ends_block(beyond):
            self.flip_after(beyond)
            self.flip_before(block_end)
        else:
            self.flip_after(block_end)
            self.flip_before(beyond)

    def _rotate_into_place(self):
        """
        Finish off a stack which reads 0, ..., n-1 up to rotation and reversal, by bringing 0 to the top with the
        rest of the values reading upwards below it.

        An ascending rotation takes 3 flips: flip_before(0), flip_after(front - 1), flip_after(0). A descending one
        is flipped whole first, so takes 4 (or just 1 if the stack is upside down). This is the reverse of the
        4 and 3 flips of the textbook sequences, which leave some rotations such as [2, 3, 0, 1] unsorted.
        """
        if self.is_sorted():
            return

        # Reading down from 0 we see n-1: reversing everything makes the values run upwards instead.
        zero = self._position(0)
        if self._pi[self._next(zero)] == self.n - 1:
            self.flip_after(int(self._pi[-1]))

        # The stack now reads front, ..., n-1, 0, ..., front - 1.
        if self._pi[0] != 0:
            front = int(self._pi[0])
            self.flip_before(0)
            self.flip_after(front - 1)
            self.flip_after(0)

        if not self.is_sorted():
            raise LogicError(f"Stack {self} is not sorted after rotating 0 to the top")
