#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## parallel.py
##
"""
    Parallel branch-and-bound search for a Golomb ruler of exact length.

    The second mark is enumerated over `1 .. length // 2` (the same symmetry
    bound as the sequential search) and these candidates are distributed over
    a pool of workers. A worker enumerates the third mark itself and hands
    every consistent prefix `0, second, third` to the sequential search, on a
    private `SearchState`.

    Workers share a cancellation token and a single-write result slot: the
    first worker to find a ruler publishes it and cancels the token, all other
    workers stop at their next poll point. When several rulers exist, which
    one is returned depends on which worker finishes first.

    Two ways of distributing the second-mark candidates are available:

    - ``strategy="map"``: one task per candidate
    - ``strategy="split"``: the candidate range is split in halves recursively
      until at most `SPLIT_THRESHOLD` candidates remain, the leaf ranges are
      forked as tasks and joined back up the tree

    Workers are threads by default, bound by the interpreter lock. With
    ``executor="process"`` they are processes, sharing a `multiprocessing`
    event as cancellation flag; the parent process is then the only writer
    of the result slot.

    ===============
    List of classes
    ===============
    .. autosummary::
        :nosignatures:

        GolombParallel

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        explore_seconds
"""
import logging
import multiprocessing
import os
from concurrent.futures import ThreadPoolExecutor, ProcessPoolExecutor, as_completed

from ..exceptions import NotSupportedError
from ..ruler import Ruler
from .cancellation import CancelToken, ResultSlot
from .sequential import GolombSequential, SearchState
from .solver_interface import SolverInterface

logger = logging.getLogger(__name__)

SPLIT_THRESHOLD = 10
STRATEGIES = ("map", "split")
EXECUTORS = ("thread", "process")


def explore_seconds(marks, length, seconds, token):
    """
        Search all rulers whose second mark is one of `seconds`.

        Requires `marks > 3`. Stops as soon as `token` is cancelled.

        :return: tuple (positions, nodes), positions is None if nothing was found
    """
    nodes = 0
    max_third = length - (marks - 3)
    for second in seconds:
        if token.is_set():
            break
        for third in range(second + 1, max_third + 1):
            if token.is_set():
                break
            state = SearchState(marks, length, token)
            state.place(1, second)
            # the three distances of 0, second, third must differ
            if state.place(2, third) is None:
                continue
            found = state.extend(3)
            nodes += state.nodes
            if found:
                return list(state.positions), nodes
    return None, nodes


# cancellation token of a worker process, set by `_init_worker()`
_worker_token = None


def _init_worker(event):
    global _worker_token
    _worker_token = CancelToken(event)


def _explore_in_worker(marks, length, seconds):
    return explore_seconds(marks, length, seconds, _worker_token)


def split_range(lo, hi, threshold=SPLIT_THRESHOLD):
    """
        Split the inclusive range `lo..hi` in halves until each part has at most `threshold`+1 values.

        :return: nested tuples ``(left, right)`` with `range` objects as leaves
    """
    if hi - lo <= threshold:
        return range(lo, hi + 1)
    mid = (lo + hi) // 2
    return (split_range(lo, mid, threshold), split_range(mid + 1, hi, threshold))


class GolombParallel(SolverInterface):
    """
        Branch-and-bound search spread over a pool of workers

        Searches with at most 3 marks run sequentially, there is nothing to distribute.

        Thread workers (the default) share one interpreter lock, so the
        search itself does not run faster on more cores; they start instantly
        and accept an external `cancel_token`. Use ``executor="process"`` to
        spread long searches over several cores.
    """

    def __init__(self, workers=None, strategy="map", executor="thread", cancel_token=None):
        """
            Arguments:
            - workers: int, size of the worker pool (default: number of CPUs)
            - strategy: "map" or "split", how second-mark candidates are handed out
            - executor: "thread" or "process", the kind of workers
            - cancel_token: CancelToken, optional, not supported with processes
        """
        if strategy not in STRATEGIES:
            raise NotSupportedError(f"Unknown strategy '{strategy}', chose from {STRATEGIES}")
        if executor not in EXECUTORS:
            raise NotSupportedError(f"Unknown executor '{executor}', chose from {EXECUTORS}")
        if executor == "process":
            if cancel_token is not None:
                raise NotSupportedError("Process workers need their own cancel token, do not pass one")
            self._mp_context = multiprocessing.get_context()
            cancel_token = CancelToken(self._mp_context.Event())

        super().__init__(name="parallel", cancel_token=cancel_token)
        self.workers = workers if workers is not None else (os.cpu_count() or 1)
        self.strategy = strategy
        self.executor = executor

    def _search(self, marks, length):
        if marks <= 3:
            sequential = GolombSequential(cancel_token=self._token)
            ruler = sequential._search(marks, length)
            self._nodes = sequential._nodes
            return ruler

        if self.strategy == "map":
            tasks = [range(second, second + 1) for second in range(1, length // 2 + 1)]
        else:
            tasks = split_range(1, length // 2)

        slot = ResultSlot()
        if self.executor == "thread":
            self._nodes = self._run_threads(marks, length, tasks, slot)
        else:
            self._nodes = self._run_processes(marks, length, tasks, slot)
        return slot.value

    def _publish(self, slot, marks, length, positions):
        if positions is not None and slot.offer(Ruler(length, marks, positions)):
            logger.info("%s: found %s", self.name, positions)
            # stop all other workers
            self._token.cancel()

    def _run_threads(self, marks, length, tasks, slot):
        def work(seconds):
            positions, nodes = explore_seconds(marks, length, seconds, self._token)
            self._publish(slot, marks, length, positions)
            return nodes

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            if self.strategy == "map":
                futures = [pool.submit(work, seconds) for seconds in tasks]
                return self._join_all(futures)
            tree = self._fork(pool, work, tasks)
            return self._join(tree)

    def _fork(self, pool, work, tree):
        if isinstance(tree, range):
            return pool.submit(work, tree)
        left, right = tree
        return (self._fork(pool, work, left), self._fork(pool, work, right))

    def _join(self, tree):
        """
            Wait for a tree of forked tasks, right subtree first, return the number of nodes searched
        """
        if not isinstance(tree, tuple):
            return self._join_all([tree])
        left, right = tree
        nodes = self._join(right)
        return nodes + self._join(left)

    def _join_all(self, futures):
        nodes = 0
        for future in futures:
            try:
                nodes += future.result()
            except Exception:
                # a failing worker stops the others, then the error propagates
                self._token.cancel()
                raise
        return nodes

    def _run_processes(self, marks, length, tasks, slot):
        if isinstance(tasks, tuple):
            tasks = list(_leaves(tasks))
        nodes = 0
        pool = ProcessPoolExecutor(max_workers=self.workers, mp_context=self._mp_context,
                                   initializer=_init_worker, initargs=(self._token.event,))
        try:
            futures = [pool.submit(_explore_in_worker, marks, length, seconds) for seconds in tasks]
            for future in as_completed(futures):
                positions, task_nodes = future.result()
                nodes += task_nodes
                self._publish(slot, marks, length, positions)
        except Exception:
            self._token.cancel()
            raise
        finally:
            pool.shutdown(wait=True, cancel_futures=True)
        return nodes


def _leaves(tree):
    if isinstance(tree, range):
        yield tree
    else:
        for sub in tree:
            yield from _leaves(sub)
