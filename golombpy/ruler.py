#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## ruler.py
##
"""
    The `Ruler` class is an immutable sequence of mark positions.

    Construction only checks the shape of the ruler: the number of marks,
    the first mark at 0, the last mark at `length` and strictly increasing
    positions. Whether all pairwise distances are distinct (i.e. whether it is
    a Golomb ruler) is a separate property, see `Ruler.is_valid()`.

    Rulers are typically created in one of two ways:

    - from known positions, e.g. ``Ruler.of(0, 1, 4, 6)``
    - as the result of a search, e.g. ``GolombSequential().search(4, 6)``

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        Ruler
"""
import numbers
from collections.abc import Iterable

import numpy as np

from .exceptions import InvalidRulerError


def _check_int(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidRulerError(f"{name} must be an integer, got {value!r}")
    return int(value)


class Ruler(object):
    """
    A ruler with `marks` marks, the first one at 0 and the last one at `length`
    """

    def __init__(self, length, marks, positions):
        """
            Arguments of constructor:

            - `length`: int, position of the last mark
            - `marks`: int, number of marks
            - `positions`: list of int, the mark positions in strictly increasing order

            Raises `InvalidRulerError` when the arguments violate the ruler invariants,
            positions are never reordered or corrected.
        """
        length = _check_int("length", length)
        marks = _check_int("marks", marks)
        positions = tuple(_check_int("position", p) for p in positions)
        if marks != len(positions):
            raise InvalidRulerError(f"Mark count {marks} does not match the {len(positions)} given positions")
        if marks > 0 and positions[0] != 0:
            raise InvalidRulerError(f"First position must be 0, got {positions[0]}")
        if marks > 1 and positions[-1] != length:
            raise InvalidRulerError(f"Last position {positions[-1]} must equal the ruler length {length}")
        for prev, cur in zip(positions, positions[1:]):
            if cur <= prev:
                raise InvalidRulerError(f"Positions must be strictly increasing, got {prev} before {cur}")

        self._length = length
        self._marks = marks
        self._positions = positions

    @classmethod
    def of(cls, *positions):
        """
            Create a ruler from positions given in any order.

            Accepts the positions as separate arguments or as a single iterable.
            The positions are sorted first, `length` and `marks` are derived from them.

            >>> Ruler.of(6, 0, 4, 1)
            Ruler(length=6, marks=4, positions=[0, 1, 4, 6])
        """
        if len(positions) == 1 and isinstance(positions[0], Iterable):
            positions = positions[0]
        ordered = sorted(_check_int("position", p) for p in positions)
        if len(ordered) == 0:
            return cls(0, 0, [])
        return cls(ordered[-1], len(ordered), ordered)

    @property
    def length(self):
        return self._length

    @property
    def marks(self):
        return self._marks

    @property
    def positions(self):
        return self._positions

    def distances(self):
        """
            All pairwise distances `positions[j] - positions[i]` for `i < j`,
            as a sorted numpy array of `marks*(marks-1)/2` integers.
        """
        if self._marks < 2:
            return np.zeros(0, dtype=int)
        pos = np.asarray(self._positions, dtype=int)
        i, j = np.triu_indices(self._marks, k=1)
        return np.sort(pos[j] - pos[i])

    def distinct_distances(self):
        """
            Number of distinct pairwise distances
        """
        return len(np.unique(self.distances()))

    def is_valid(self):
        """
            True if all pairwise distances are distinct, i.e. this is a Golomb ruler
        """
        dist = self.distances()
        return not bool(np.any(dist[1:] == dist[:-1]))

    def missing_distances(self):
        """
            The integers in `[1, length]` that are not a distance between two marks, ascending
        """
        return np.setdiff1d(np.arange(1, self._length + 1), self.distances())

    def reflect(self):
        """
            The mirror image of this ruler, every mark `p` moved to `length - p`.

            A ruler and its reflection have the same distances.
        """
        return Ruler.of([self._length - p for p in self._positions])

    def to_text(self):
        """
            Render as `key=value` lines, as used in result files:
            length, marks, positions, distances and missing distances
        """
        lines = [f"length={self._length}",
                 f"marks={self._marks}",
                 "positions=" + " ".join(str(p) for p in self._positions),
                 "distances=" + " ".join(str(d) for d in self.distances()),
                 "missing=" + " ".join(str(d) for d in self.missing_distances())]
        return "\n".join(lines) + "\n"

    def __len__(self):
        return self._marks

    def __iter__(self):
        return iter(self._positions)

    def __eq__(self, other):
        if not isinstance(other, Ruler):
            return NotImplemented
        return self._positions == other._positions

    def __hash__(self):
        return hash(self._positions)

    def __repr__(self):
        return f"Ruler(length={self._length}, marks={self._marks}, positions={list(self._positions)})"

    def __str__(self):
        return " ".join(str(p) for p in self._positions)
