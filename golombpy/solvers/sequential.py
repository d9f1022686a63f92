#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## sequential.py
##
"""
    Single-threaded branch-and-bound search for a Golomb ruler of exact length.

    Marks are placed left to right by a depth-first search. At depth `d`
    (marks `0..d-1` placed) the next mark is tried at every position from
    `last+1` up to `length - (marks-d-1)`, so the remaining marks still fit.
    A candidate is rejected as soon as one of its distances to the placed
    marks is already used by any earlier pair. The used distances are undone
    on backtrack.

    Mirror symmetry is broken on the second mark: it never goes beyond
    `length // 2`, as the reflection of a ruler has the same distances.

    A search only succeeds with the last mark exactly at `length`, it does
    not look for shorter rulers.

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        SearchState
        GolombSequential
"""
import logging

from ..ruler import Ruler
from .solver_interface import SolverInterface

logger = logging.getLogger(__name__)


class SearchState(object):
    """
        Partial ruler owned by a single worker: the marks placed so far and
        a presence table of the distances they use.

        Never shared between threads, only the cancellation token is.
    """

    def __init__(self, marks, length, token):
        self.marks = marks
        self.length = length
        self.token = token
        self.positions = [0] * marks
        self.used = [False] * (length + 1)
        self.nodes = 0

    def place(self, depth, pos):
        """
            Put mark `depth` at `pos` if none of its distances to marks `0..depth-1` is used yet.

            :return: list of the new distances (now marked used), or None if `pos` collides
        """
        used = self.used
        new = [pos - p for p in self.positions[:depth]]
        for d in new:
            if used[d]:
                return None
        for d in new:
            used[d] = True
        self.positions[depth] = pos
        return new

    def unplace(self, distances):
        used = self.used
        for d in distances:
            used[d] = False

    def extend(self, depth):
        """
            Place marks `depth..marks-1`, recursively.

            :return: True if all marks are placed with the last one exactly at `length`,
                     False if no placement exists or the token got cancelled
        """
        if self.token.is_set():
            return False
        self.nodes += 1

        marks, length = self.marks, self.length
        if depth == marks:
            return self.positions[marks - 1] == length

        last = self.positions[depth - 1]
        # remaining marks can not fit anymore
        if last + (marks - depth) > length:
            return False

        max_next = length - (marks - depth - 1)
        if depth == 1 and marks > 2:
            # symmetry breaking
            max_next = min(max_next, max(last + 1, length // 2))
        # the last mark can only go at `length`
        first = length if depth == marks - 1 else last + 1

        verbose = depth <= 2 and logger.isEnabledFor(logging.DEBUG)
        for nxt in range(first, max_next + 1):
            if self.token.is_set():
                return False
            new = self.place(depth, nxt)
            if new is None:
                continue
            if verbose:
                logger.debug("Trying depth %d, position %d", depth, nxt)
            if self.extend(depth + 1):
                return True
            self.unplace(new)

        return False

    def ruler(self):
        return Ruler(self.length, self.marks, self.positions)


class GolombSequential(SolverInterface):
    """
        Depth-first branch-and-bound search in the calling thread

        >>> GolombSequential().search(4, 6)
        Ruler(length=6, marks=4, positions=[0, 1, 4, 6])
    """

    def __init__(self, cancel_token=None):
        super().__init__(name="sequential", cancel_token=cancel_token)

    def _search(self, marks, length):
        state = SearchState(marks, length, self._token)
        found = state.extend(1)
        self._nodes = state.nodes
        if found:
            return state.ruler()
        return None
