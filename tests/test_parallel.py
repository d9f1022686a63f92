import unittest

import pytest

from golombpy import lut
from golombpy.exceptions import NotSupportedError
from golombpy.solvers import GolombParallel, GolombSequential, CancelToken, ExitStatus
from golombpy.solvers import parallel
from golombpy.solvers.parallel import split_range, explore_seconds

from utils import search_until_cancelled

STRATEGIES = ["map", "split"]


def check_ruler(ruler, marks, length):
    assert ruler is not None
    assert ruler.is_valid()
    assert ruler.positions[0] == 0
    assert (ruler.marks, ruler.length) == (marks, length)


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize(("marks", "length"), [(4, 6), (5, 11), (5, 15), (6, 17), (7, 25)])
def test_found(strategy, marks, length):
    s = GolombParallel(workers=4, strategy=strategy)
    check_ruler(s.search(marks, length), marks, length)
    assert s.status().exitstatus == ExitStatus.FOUND


@pytest.mark.parametrize("strategy", STRATEGIES)
@pytest.mark.parametrize(("marks", "length"), [(4, 5), (5, 10), (6, 16)])
def test_not_found(strategy, marks, length):
    s = GolombParallel(workers=4, strategy=strategy)
    assert s.search(marks, length) is None
    assert s.status().exitstatus == ExitStatus.NOT_FOUND
    assert s.status().nodes > 0


@pytest.mark.parametrize("strategy", STRATEGIES)
def test_agrees_with_sequential(strategy):
    s = GolombParallel(workers=3, strategy=strategy)
    for marks in range(2, 6):
        for length in range(1, 15):
            expected = GolombSequential().search(marks, length)
            ruler = s.search(marks, length)
            assert (ruler is None) == (expected is None), (marks, length)
            if ruler is not None:
                check_ruler(ruler, marks, length)


def test_few_marks_run_sequentially():
    s = GolombParallel(workers=2)
    assert s.search(3, 3).positions == (0, 1, 3)
    assert s.search(2, 5).positions == (0, 5)
    assert s.search(3, 2) is None


@pytest.mark.timeout(120)
@pytest.mark.parametrize("strategy", STRATEGIES)
def test_process_workers(strategy):
    s = GolombParallel(workers=2, strategy=strategy, executor="process")
    check_ruler(s.search(5, 11), 5, 11)
    assert s.search(5, 10) is None
    assert s.status().exitstatus == ExitStatus.NOT_FOUND


class TestParallelOptions(unittest.TestCase):
    def test_defaults(self):
        s = GolombParallel()
        self.assertEqual(s.name, "parallel")
        self.assertEqual(s.strategy, "map")
        self.assertEqual(s.executor, "thread")
        self.assertGreaterEqual(s.workers, 1)

    def test_unknown_options(self):
        self.assertRaises(NotSupportedError, GolombParallel, strategy="steal")
        self.assertRaises(NotSupportedError, GolombParallel, executor="cluster")

    def test_process_workers_own_token(self):
        self.assertRaises(NotSupportedError, GolombParallel, executor="process", cancel_token=CancelToken())

    def test_find_cancels_token(self):
        token = CancelToken()
        s = GolombParallel(workers=2, cancel_token=token)
        self.assertIsNotNone(s.search(6, 17))
        # the token stopped the other workers, the result is still a find
        self.assertTrue(token.is_set())
        self.assertEqual(s.status().exitstatus, ExitStatus.FOUND)
        self.assertFalse(s.cancelled)

    def test_worker_error_propagates(self):
        def boom(marks, length, seconds, token):
            raise RuntimeError("worker failed")

        s = GolombParallel(workers=2)
        explore = parallel.explore_seconds
        parallel.explore_seconds = boom
        try:
            with self.assertRaises(RuntimeError):
                s.search(5, 11)
        finally:
            parallel.explore_seconds = explore
        self.assertTrue(s._token.is_set())


class TestParallelCancel(unittest.TestCase):
    @pytest.mark.timeout(30)
    def test_cancel_threads(self):
        for strategy in STRATEGIES:
            s = GolombParallel(workers=2, strategy=strategy)
            ruler, elapsed = search_until_cancelled(s, 14, 126)
            self.assertIsNone(ruler)
            self.assertEqual(s.status().exitstatus, ExitStatus.CANCELLED)
            self.assertLess(elapsed, 10)

    @pytest.mark.timeout(60)
    def test_cancel_processes(self):
        s = GolombParallel(workers=2, executor="process")
        ruler, _ = search_until_cancelled(s, 14, 126, delay=0.5)
        self.assertIsNone(ruler)
        self.assertEqual(s.status().exitstatus, ExitStatus.CANCELLED)


class TestWorkDistribution(unittest.TestCase):
    def test_small_range_is_a_leaf(self):
        self.assertEqual(split_range(1, 5), range(1, 6))
        self.assertEqual(split_range(1, 11), range(1, 12))

    def test_split_covers_range(self):
        tree = split_range(1, 62)
        self.assertIsInstance(tree, tuple)
        leaves = list(parallel._leaves(tree))
        self.assertEqual([v for leaf in leaves for v in leaf], list(range(1, 63)))
        for leaf in leaves:
            self.assertLessEqual(len(leaf), parallel.SPLIT_THRESHOLD + 1)

    def test_explore_seconds(self):
        positions, nodes = explore_seconds(5, 11, range(1, 2), CancelToken())
        self.assertEqual(positions, [0, 1, 4, 9, 11])
        self.assertGreater(nodes, 0)

        positions, _ = explore_seconds(5, 10, range(1, 6), CancelToken())
        self.assertIsNone(positions)

    def test_explore_seconds_cancelled(self):
        token = CancelToken()
        token.cancel()
        self.assertEqual(explore_seconds(5, 11, range(1, 6), token), (None, 0))


def test_known_optimal_lengths():
    s = GolombParallel(workers=4)
    for marks in range(2, 8):
        length = lut.optimal_length(marks)
        ruler = s.search(marks, length)
        check_ruler(ruler, marks, length)
        assert lut.is_optimal(ruler)
