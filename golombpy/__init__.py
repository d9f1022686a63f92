"""
    golombpy searches Golomb rulers of an exact length.

    A Golomb ruler is a set of integer marks such that all distances between
    two marks are distinct. Given a number of marks and a target length,
    golombpy answers whether a Golomb ruler with exactly that many marks and
    its last mark exactly at that length exists, and returns one if so.

    The package consists of 4 modules:
    - `ruler`: the immutable `Ruler` with its distances, missing distances and validity check
    - `solvers`: the search engines (sequential, parallel and OR-Tools CP-SAT)
    - `lut`: the table of previously published optimal rulers
    - `cli`: the `golombpy` command line interface
"""

__version__ = "0.3.0"


from .ruler import Ruler
from .exceptions import GolombException, InvalidRulerError, InvalidSearchError, NotSupportedError
from .solvers import SolverLookup, GolombSequential, GolombParallel, GolombOrtools, sweep
from . import lut


def search(marks, length, solver=None, **init_kwargs):
    """
        Search a Golomb ruler with `marks` marks and last mark exactly at `length`.

        Shorthand for ``SolverLookup.get(solver, **init_kwargs).search(marks, length)``,
        by default with the parallel engine.

        :return: Ruler or None
    """
    return SolverLookup.get(solver, **init_kwargs).search(marks, length)
