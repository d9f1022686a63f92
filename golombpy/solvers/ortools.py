#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## ortools.py
##
"""
    Exact-length Golomb ruler search with OR-Tools' CP-SAT solver

    Answers the same question as the branch-and-bound engines, through a
    constraint model instead of a hand-written search:

    - one integer variable per mark in `[0, length]`, the first at 0 and the last at `length`
    - strictly increasing marks
    - one difference variable per pair of marks, all different
    - symmetry breaking: the first gap is smaller than the last gap

    Documentation of the solver's own Python API:
    https://developers.google.com/optimization/reference/python/sat/python/cp_model

    ===============
    List of classes
    ===============

    .. autosummary::
        :nosignatures:

        GolombOrtools
"""
import logging
import threading

from ..exceptions import GolombException, NotSupportedError
from ..ruler import Ruler
from .solver_interface import SolverInterface

logger = logging.getLogger(__name__)


class GolombOrtools(SolverInterface):
    """
    Interface to the python 'ortools' CP-SAT API

    Requires that the 'ortools' python package is installed:
    $ pip install ortools

    Creates the following attributes (see parent constructor for more):
    ort_model: the ortools.sat.python.cp_model.CpModel() of the last search
    ort_solver: the ortools cp_model.CpSolver() instance used in the last search
    """

    # how often the cancellation token is checked while CP-SAT runs, in seconds
    poll_interval = 0.05

    @staticmethod
    def supported():
        # try to import the package
        try:
            import ortools
            return True
        except ImportError:
            return False

    def __init__(self, time_limit=None, workers=None, cancel_token=None, **kwargs):
        """
            Arguments:
            - time_limit: float, optional, maximum solve time in seconds per search
            - workers: int, optional, number of CP-SAT search workers
            - cancel_token: CancelToken, optional
            - any other keyword argument is set on the CP-SAT parameters (see sat_parameters.proto)
        """
        if not self.supported():
            raise NotSupportedError("Install the python 'ortools' package to use this solver interface")
        super().__init__(name="ortools", cancel_token=cancel_token)
        self.time_limit = time_limit
        self.workers = workers
        self.solver_params = kwargs
        self.ort_model = None
        self.ort_solver = None

    def make_model(self, marks, length):
        """
            Build the CP-SAT model of a ruler with `marks` marks ending exactly at `length`.

            :return: tuple (CpModel, list of mark variables)
        """
        from ortools.sat.python import cp_model as ort

        model = ort.CpModel()
        x = [model.new_int_var(0, max(length, 0), f"mark_{i}") for i in range(marks)]

        model.add(x[0] == 0)
        model.add(x[-1] == length)
        for i in range(marks - 1):
            model.add(x[i + 1] > x[i])

        diffs = []
        for i in range(marks - 1):
            for j in range(i + 1, marks):
                diff = model.new_int_var(0, max(length, 0), f"diff_{j}_{i}")
                model.add(diff == x[j] - x[i])
                diffs.append(diff)
        model.add_all_different(diffs)

        # symmetry breaking, the gaps can not be equal on a Golomb ruler
        if marks > 2:
            model.add(x[1] - x[0] < x[-1] - x[-2])

        return model, x

    def _search(self, marks, length):
        from ortools.sat.python import cp_model as ort

        self.ort_model, x = self.make_model(marks, length)
        self.ort_solver = ort.CpSolver()
        if self.time_limit is not None:
            self.ort_solver.parameters.max_time_in_seconds = float(self.time_limit)
        if self.workers is not None:
            self.ort_solver.parameters.num_workers = int(self.workers)
        # set additional keyword arguments in sat_parameters.proto
        for (kw, val) in self.solver_params.items():
            setattr(self.ort_solver.parameters, kw, val)

        done = threading.Event()
        watcher = threading.Thread(target=self._watch, args=(done,), daemon=True)
        watcher.start()
        try:
            ort_status = self.ort_solver.solve(self.ort_model)
        finally:
            done.set()
            watcher.join()

        self._nodes = self.ort_solver.num_branches

        if ort_status in (ort.OPTIMAL, ort.FEASIBLE):
            return Ruler(length, marks, [self.ort_solver.value(v) for v in x])
        elif ort_status == ort.INFEASIBLE:
            return None
        elif ort_status == ort.UNKNOWN:
            # time limit reached or search stopped
            self._interrupted = True
            return None
        elif ort_status == ort.MODEL_INVALID:
            raise GolombException(f"OR-Tools says: model invalid: {self.ort_model.validate()}")
        else:  # another?
            raise NotImplementedError(ort_status)

    def _watch(self, done):
        """
            Forward a cancellation of the token to the running CP-SAT search, until `done` is set
        """
        stopping = False
        while not done.wait(self.poll_interval):
            if self._token.is_set():
                if not stopping:
                    logger.info("%s: stopping search", self.name)
                    stopping = True
                # a stop before the solve started is not remembered by CP-SAT
                self.ort_solver.stop_search()
