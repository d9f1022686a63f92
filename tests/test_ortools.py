import threading
import time
import unittest

import pytest

from golombpy.solvers import GolombOrtools, ExitStatus
from golombpy.exceptions import InvalidSearchError

from utils import search_until_cancelled


@pytest.mark.requires_dependency("ortools")
class TestOrtools(unittest.TestCase):
    def test_supported(self):
        self.assertTrue(GolombOrtools.supported())
        self.assertEqual(GolombOrtools().name, "ortools")

    def test_found(self):
        s = GolombOrtools()
        for marks, length in [(2, 3), (4, 6), (5, 11), (6, 17), (5, 15)]:
            ruler = s.search(marks, length)
            self.assertIsNotNone(ruler)
            self.assertTrue(ruler.is_valid())
            self.assertEqual((ruler.marks, ruler.length), (marks, length))
            self.assertEqual(s.status().exitstatus, ExitStatus.FOUND)

    def test_not_found(self):
        s = GolombOrtools()
        self.assertIsNone(s.search(4, 5))
        self.assertEqual(s.status().exitstatus, ExitStatus.NOT_FOUND)
        self.assertIsNone(s.search(6, 16))
        self.assertFalse(s.cancelled)

    def test_invalid_arguments(self):
        self.assertRaises(InvalidSearchError, GolombOrtools().search, 33, 10)

    def test_model(self):
        model, x = GolombOrtools().make_model(4, 6)
        self.assertEqual(len(x), 4)
        self.assertEqual(model.validate(), "")

    def test_solver_parameters(self):
        s = GolombOrtools(workers=1, random_seed=7)
        self.assertIsNotNone(s.search(5, 11))
        self.assertEqual(s.ort_solver.parameters.num_workers, 1)
        self.assertEqual(s.ort_solver.parameters.random_seed, 7)

    @pytest.mark.timeout(60)
    def test_time_limit(self):
        s = GolombOrtools(time_limit=0.5, workers=1)
        self.assertIsNone(s.search(14, 126))
        self.assertEqual(s.status().exitstatus, ExitStatus.CANCELLED)

    def test_watcher_keeps_forwarding_cancel(self):
        class StubSolver:
            stops = 0

            def stop_search(self):
                self.stops += 1

        s = GolombOrtools()
        s.ort_solver = StubSolver()
        s._token.cancel()
        done = threading.Event()
        watcher = threading.Thread(target=s._watch, args=(done,))
        watcher.start()
        time.sleep(10 * s.poll_interval)
        # still running, a cancel before the solve started is sent again
        self.assertTrue(watcher.is_alive())
        done.set()
        watcher.join(1)
        self.assertFalse(watcher.is_alive())
        self.assertGreater(s.ort_solver.stops, 1)

    @pytest.mark.timeout(60)
    def test_cancel(self):
        s = GolombOrtools(workers=1)
        ruler, elapsed = search_until_cancelled(s, 14, 126, delay=0.5)
        self.assertIsNone(ruler)
        self.assertEqual(s.status().exitstatus, ExitStatus.CANCELLED)
        self.assertLess(elapsed, 20)


if __name__ == '__main__':
    unittest.main()
