import itertools
import threading
import time

from golombpy import Ruler


def brute_force_exists(marks, length):
    """Whether any Golomb ruler with `marks` marks ends exactly at `length`, by enumeration"""
    for inner in itertools.combinations(range(1, length), marks - 2):
        if Ruler.of(0, *inner, length).is_valid():
            return True
    return False


def search_until_cancelled(solver, marks, length, delay=0.2):
    """Run `solver.search()` in a thread and keep cancelling it until it returns"""
    result = dict()
    t = threading.Thread(target=lambda: result.update(ruler=solver.search(marks, length)))
    tstart = time.time()
    t.start()
    time.sleep(delay)
    while t.is_alive():
        solver.cancel()
        t.join(0.05)
    return result["ruler"], time.time() - tstart
