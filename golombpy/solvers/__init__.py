"""
    golombpy search engines

    All engines answer the same question through `search(marks, length)`:
    is there a Golomb ruler with exactly `marks` marks whose last mark is
    exactly at `length`? They return a `Ruler`, or None.

    =========================
    List of helper submodules
    =========================
    .. autosummary::
        :nosignatures:

        solver_interface
        cancellation
        utils

    =========================
    List of solver submodules
    =========================
    .. autosummary::
        :nosignatures:

        sequential
        parallel
        ortools

    =================
    List of functions
    =================
    .. autosummary::
        :nosignatures:

        sweep
"""

from .utils import SolverLookup, sweep
from .solver_interface import SolverInterface, SolverStatus, ExitStatus
from .cancellation import CancelToken, ResultSlot
from .sequential import GolombSequential
from .parallel import GolombParallel
from .ortools import GolombOrtools
