"""
    ===============
    List of classes
    ===============

    .. autosummary::
        :nosignatures:

        SolverInterface
        SolverStatus
        ExitStatus

    ==================
    Module description
    ==================
    Contains the abstract class `SolverInterface` for defining search engines,
    as well as a class `SolverStatus` that collects search statistics,
    and the `ExitStatus` class that represents possible exit statuses.

    Each search engine has its own class that inherits from `SolverInterface`.

"""
import logging
import numbers
import time
from enum import Enum

from ..exceptions import InvalidSearchError
from .cancellation import CancelToken

logger = logging.getLogger(__name__)

MIN_MARKS = 2
MAX_MARKS = 32
MAX_LENGTH = 600


def check_search_args(marks, length):
    """
        Raise `InvalidSearchError` if `marks` is outside [MIN_MARKS, MAX_MARKS]
        or `length` exceeds MAX_LENGTH
    """
    for name, value in (("marks", marks), ("length", length)):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidSearchError(f"{name} must be an integer, got {value!r}")
    if marks < MIN_MARKS or marks > MAX_MARKS:
        raise InvalidSearchError(f"Marks must be between {MIN_MARKS} and {MAX_MARKS}, got {marks}")
    if length > MAX_LENGTH:
        raise InvalidSearchError(f"Length cannot exceed {MAX_LENGTH}, got {length}")


class SolverInterface(object):
    """
        Abstract class for defining search engines. All classes implementing
        the ``SolverInterface`` answer the same question: is there a Golomb
        ruler with exactly `marks` marks whose last mark is exactly at `length`?
    """

    # REQUIRED functions:

    @staticmethod
    def supported():
        """
            Check for support in current system setup. Return True if the system
            has the required packages installed, else returns False.

        Returns:
            [bool]: Solver support by current system setup.
        """
        return True

    def __init__(self, name="dummy", cancel_token=None):
        """
            Initalize solver interface

            - name: str: name of this solver
            - cancel_token: CancelToken, optional: shared with other solvers to cancel them together

            Creates the following attributes:
            - name: str, name of the solver
            - golomb_status: SolverStatus(), the status after a `search()`
        """
        self.name = name
        self.golomb_status = SolverStatus(self.name)
        self._token = CancelToken() if cancel_token is None else cancel_token
        self._interrupted = False
        self._nodes = None

    def search(self, marks, length):
        """
            Search for a Golomb ruler with `marks` marks and last mark at exactly `length`.

            Overwrites self.golomb_status

            Starting a search clears any earlier cancellation of this solver.

        :param marks: number of marks, between MIN_MARKS and MAX_MARKS
        :type marks: int

        :param length: exact length of the ruler, at most MAX_LENGTH
        :type length: int

        :return: Ruler or None:
            - a valid Ruler if one exists and the search was not cancelled
            - None if no such ruler exists, or if the search was cancelled
              (use `status()` to tell them apart)
        """
        check_search_args(marks, length)

        self._interrupted = False
        self._token.reset()
        self._nodes = None
        self.golomb_status = SolverStatus(self.name)

        logger.info("%s: searching %d marks at length %d", self.name, marks, length)
        tstart = time.time()
        ruler = self._search(marks, length)
        self.golomb_status.runtime = time.time() - tstart
        self.golomb_status.nodes = self._nodes

        if ruler is not None:
            self.golomb_status.exitstatus = ExitStatus.FOUND
        elif self._interrupted or self._token.is_set():
            # stopped by this solver, or through a token shared with other solvers
            self._interrupted = True
            self.golomb_status.exitstatus = ExitStatus.CANCELLED
        else:
            self.golomb_status.exitstatus = ExitStatus.NOT_FOUND
        logger.info("%s: %s", self.name, self.golomb_status)

        return ruler

    def _search(self, marks, length):
        """
            Engine-specific search on already validated arguments, returns a Ruler or None
        """
        raise NotImplementedError("solver _search(): abstract function, overwrite")

    def cancel(self):
        """
            Ask the running search to stop at its next poll point.

            Idempotent and thread-safe, the interrupted search returns None.
        """
        self._interrupted = True
        self._token.cancel()

    @property
    def cancelled(self):
        """
            Whether the last (or running) search was cancelled or interrupted
        """
        return self._interrupted

    def status(self):
        return self.golomb_status

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"


#==============================================================================
class ExitStatus(Enum):
    """
    Exit status of a search

    Attributes:

        `NOT_RUN`: Has not been run

        `FOUND`: A ruler of the requested shape was found

        `NOT_FOUND`: The search completed, no ruler of the requested shape exists

        `CANCELLED`: The search was cancelled (or hit a time limit) before completing
    """
    NOT_RUN = 1
    FOUND = 2
    NOT_FOUND = 3
    CANCELLED = 4

#==============================================================================
class SolverStatus(object):
    """
        Status and statistics of a search run
    """
    exitstatus: ExitStatus
    runtime: float

    def __init__(self, name):
        self.solver_name = name
        self.exitstatus = ExitStatus.NOT_RUN
        self.runtime = None
        self.nodes = None

    def __repr__(self):
        return "{} ({} seconds)".format(self.exitstatus, self.runtime)
