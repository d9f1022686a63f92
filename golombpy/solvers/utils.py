#!/usr/bin/env python
#-*- coding:utf-8 -*-
##
## utils.py
##
"""
    Utilities for handling solvers

    =================
    List of functions
    =================

    .. autosummary::
        :nosignatures:

        sweep
"""
import logging

from ..lut import optimal_length
from .parallel import GolombParallel
from .sequential import GolombSequential
from .ortools import GolombOrtools
from .solver_interface import MAX_LENGTH, ExitStatus

logger = logging.getLogger(__name__)


class SolverLookup():
    @classmethod
    def base_solvers(cls):
        """
            Return ordered list of (name, class) of base golombpy
            solvers

            First one is default
        """
        return [
                ("parallel", GolombParallel),
                ("sequential", GolombSequential),
                ("ortools", GolombOrtools),
               ]

    @classmethod
    def print_status(cls):
        """
            Print all golombpy solvers and their installation status on this system.
        """
        for (basename, slv) in cls.base_solvers():
            if slv.supported():
                print(f"{basename}: Supported, ready to use.")
            else:
                print(f"{basename}: Not supported (missing Python package).")

    @classmethod
    def supported(cls):
        """
            Return the list of names of all solvers supported on this system.
        """
        return [basename for (basename, slv) in cls.base_solvers() if slv.supported()]

    @classmethod
    def get(cls, name=None, **init_kwargs):
        """
            get a specific solver (by name), with `init_kwargs` passed to its constructor

            This is the preferred way to initialise a solver from its name

            :param name: name of the solver to use, None for the default one
            :param init_kwargs: additional keyword arguments to pass to the solver constructor
        """
        solver_cls = cls.lookup(name=name)
        return solver_cls(**init_kwargs)

    @classmethod
    def lookup(cls, name=None):
        """
            lookup a solver _class_ by its name

            warning: returns a 'class', not an object!
            see get() for normal uses
        """
        if name is None:
            # first solver class
            return cls.base_solvers()[0][1]

        for (basename, slv) in cls.base_solvers():
            if basename == name:
                return slv

        raise ValueError(f"Unknown solver '{name}', chose from {[n for n, _ in cls.base_solvers()]}")


def sweep(marks, start=None, stop=MAX_LENGTH, solver=None, stop_event=None):
    """
        Try lengths `start, start+1, ..., stop` until a ruler with `marks` marks is found.

        Each attempt is an exact-length search, so the first ruler found is
        the shortest one in that range.

        - marks: int, number of marks
        - start: int, first length to try. Defaults to the known optimal length
                 if the table has one, else to `marks*(marks-1)//2`
        - stop: int, last length to try
        - solver: SolverInterface, default: `SolverLookup.get()`
        - stop_event: threading.Event, optional, checked between two lengths

        :return: the first Ruler found, or None
    """
    if solver is None:
        solver = SolverLookup.get()
    if start is None:
        start = optimal_length(marks)
        if start is None:
            start = marks * (marks - 1) // 2

    for length in range(start, stop + 1):
        if stop_event is not None and stop_event.is_set():
            return None
        ruler = solver.search(marks, length)
        if ruler is not None:
            return ruler
        if solver.status().exitstatus == ExitStatus.CANCELLED:
            return None
        logger.info("No ruler with %d marks at length %d", marks, length)
    return None
