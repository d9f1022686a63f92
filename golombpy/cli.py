"""
Command-line interface for golombpy.

Usage:
    golombpy <COMMAND>

Commands:
    search    Search a Golomb ruler with a given number of marks.
    table     Show the known optimal rulers.
    version   Show the golombpy version and the available solvers.

Examples:
    golombpy search 5
    golombpy search 8 -b --time-limit 60
    golombpy search 10 -b -s -o ruler10.txt
"""

import argparse
import logging
import os
import sys
import threading
import time
import warnings
from datetime import datetime

from golombpy import __version__
import golombpy as gp
from golombpy.exceptions import GolombException
from golombpy.solvers.parallel import STRATEGIES, EXECUTORS
from golombpy.solvers.solver_interface import MAX_LENGTH, ExitStatus, check_search_args

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_elapsed(seconds):
    """
        h:mm:ss.mmm above an hour, mm:ss.mmm above a minute, else s.mmm s
    """
    hours = int(seconds // 3600)
    minutes = int((seconds - hours * 3600) // 60)
    rest = seconds - hours * 3600 - minutes * 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{rest:06.3f}"
    if minutes > 0:
        return f"{minutes:02d}:{rest:06.3f}"
    return f"{rest:.3f} s"


class Heartbeat(threading.Thread):
    """
        Logs the elapsed time every `interval` seconds until stopped
    """

    def __init__(self, interval, start_time=None):
        super().__init__(name="heartbeat", daemon=True)
        self.interval = interval
        self.start_time = time.time() if start_time is None else start_time
        self._stopped = threading.Event()

    def run(self):
        while not self._stopped.wait(self.interval):
            logger.info("[VT] %s elapsed", format_elapsed(time.time() - self.start_time))

    def stop(self):
        self._stopped.set()


def _solver_name(args):
    if args.solver is not None:
        return args.solver
    return "sequential" if args.single else "parallel"


def _option_flags(args):
    """
        The options that shaped the run, as (file name suffix, option string)
    """
    name = _solver_name(args)
    flags = []
    if name == "sequential":
        flags.append("s")
    elif name == "parallel":
        flags.append("mp")
    elif name == "ortools":
        flags.append("x")
    if args.best:
        flags.append("b")
    if args.verbose:
        flags.append("v")
    suffix = "".join("_" + f for f in flags)
    options = " ".join("-" + f for f in flags)
    return suffix, options or "none"


def make_solver(args):
    name = _solver_name(args)
    kwargs = dict()
    if name == "parallel":
        kwargs.update(workers=args.workers, strategy=args.strategy, executor=args.executor)
    elif name == "ortools":
        kwargs.update(workers=args.workers)
    return gp.SolverLookup.get(name, **kwargs)


def result_text(ruler, elapsed, options, optimal):
    """
        Content of a result file: the ruler's `key=value` lines, timing, options and optimality
    """
    text = ruler.to_text()
    text += f"seconds={elapsed:.6f}\n"
    text += f"time={format_elapsed(elapsed)}\n"
    text += f"options={options}\n"
    if optimal is not None:
        text += f"optimal={'yes' if optimal else 'no'}\n"
    return text


def write_result(fname, text):
    dirname = os.path.dirname(fname)
    if dirname:
        os.makedirs(dirname, exist_ok=True)
    with open(fname, "w") as f:
        f.write(text)


def command_search(args):
    marks = args.marks
    check_search_args(marks, args.length if args.length is not None else MAX_LENGTH)

    reference = gp.lut.optimal_ruler(marks)
    length = args.length
    if length is None and args.best:
        if reference is None:
            warnings.warn(f"No known optimal ruler with {marks} marks, searching from the lower bound")
        else:
            length = reference.length
            print(f"Using heuristic: known optimal length is {length}")

    solver = make_solver(args)

    print(f"Golomb Ruler Finder - golombpy {__version__}")
    print(f"Start time: {datetime.now().strftime(TIME_FORMAT)}")
    print(f"Searching ruler with {marks} marks using the {solver.name} solver")
    if reference is not None and args.verbose:
        print(f"Reference optimal ruler: {reference}")

    stop_event = threading.Event()
    finished = threading.Event()

    def on_time_limit():
        logger.warning("Time limit of %s seconds reached, cancelling", args.time_limit)
        stop_event.set()
        solver.cancel()
        # a search starting concurrently clears the cancellation
        while not finished.wait(0.1):
            solver.cancel()

    timer = None
    if args.time_limit is not None:
        timer = threading.Timer(args.time_limit, on_time_limit)
        timer.daemon = True
    tstart = time.time()
    heartbeat = None
    if args.heartbeat is not None:
        heartbeat = Heartbeat(args.heartbeat * 60, start_time=tstart)
        heartbeat.start()

    try:
        if timer is not None:
            timer.start()
        if length is not None:
            ruler = solver.search(marks, length)
        else:
            ruler = gp.sweep(marks, start=marks * (marks - 1) // 2, solver=solver, stop_event=stop_event)
    finally:
        finished.set()
        if timer is not None:
            timer.cancel()
        if heartbeat is not None:
            heartbeat.stop()
    elapsed = time.time() - tstart

    if ruler is None:
        if solver.status().exitstatus == ExitStatus.CANCELLED or stop_event.is_set():
            print(f"Search cancelled after {format_elapsed(elapsed)}", file=sys.stderr)
        elif length is not None:
            print(f"Could not find a Golomb ruler with {marks} marks and length {length}", file=sys.stderr)
        else:
            print(f"Could not find a Golomb ruler with {marks} marks within length limit {MAX_LENGTH}",
                  file=sys.stderr)
        return 1

    distances = ruler.distances()
    missing = ruler.missing_distances()
    print(f"End time:   {datetime.now().strftime(TIME_FORMAT)}")
    print(f"Found ruler: {ruler}")
    print(f"Elapsed time: {format_elapsed(elapsed)}")
    print(f"Distances ({len(distances)}): {' '.join(str(d) for d in distances)}")
    print(f"Missing ({len(missing)}): {' '.join(str(d) for d in missing)}")

    optimal = gp.lut.is_optimal(ruler) if reference is not None else None
    if optimal is None:
        print("No comparison possible (length missing from the table)")
    else:
        print(f"Status: {'Optimal' if optimal else 'Not optimal'}")

    suffix, options = _option_flags(args)
    fname = args.output if args.output is not None else os.path.join("out", f"GOL_n{marks}{suffix}.txt")
    try:
        write_result(fname, result_text(ruler, elapsed, options, optimal))
        print(f"Results written to: {fname}")
    except OSError as e:
        logger.error("Could not write result file %s: %s", fname, e)

    return 1 if optimal is False else 0


def command_table(args):
    table = gp.lut.all_optimal_rulers()
    if args.marks is not None:
        if args.marks not in table:
            print(f"No known optimal ruler with {args.marks} marks", file=sys.stderr)
            return 1
        selected = [args.marks]
    else:
        selected = sorted(table)

    for marks in selected:
        ruler = table[marks]
        distances = ruler.distances()
        print(f"n={marks:<2d} length={ruler.length:<3d} marks={list(ruler.positions)}")
        print(f"Distances ({len(distances)}): {list(distances.tolist())}")
        print()
    return 0


def command_version(args):
    print(f"golombpy version: {__version__}")
    gp.SolverLookup.print_status()
    return 0


def make_parser():
    parser = argparse.ArgumentParser(prog="golombpy", description="golombpy command line interface")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # golombpy search
    search_parser = subparsers.add_parser("search", help="Search a Golomb ruler with the given number of marks")
    search_parser.add_argument("marks", type=int, help="Number of marks of the ruler.")
    search_parser.add_argument("-l", "--length", type=int, default=None,
                               help="Exact length of the ruler. Without it (and without -b), lengths are tried "
                                    "upwards from the lower bound marks*(marks-1)/2.")
    search_parser.add_argument("-b", "--best", action="store_true",
                               help="Use the best-known ruler length as target length.")
    search_parser.add_argument("-s", "--single", action="store_true",
                               help="Force the single-threaded solver.")
    search_parser.add_argument("--solver", type=str, default=None,
                               choices=[name for name, _ in gp.SolverLookup.base_solvers()],
                               help="Solver to use (default: parallel, or sequential with -s).")
    search_parser.add_argument("--strategy", type=str, default="map", choices=STRATEGIES,
                               help="How the parallel solver distributes work.")
    search_parser.add_argument("--executor", type=str, default="thread", choices=EXECUTORS,
                               help="Kind of workers of the parallel solver.")
    search_parser.add_argument("-w", "--workers", type=int, default=None,
                               help="Number of workers (default: number of CPUs).")
    search_parser.add_argument("-o", "--output", type=str, default=None,
                               help="Write the found ruler to this file (default: out/GOL_n<marks>....txt).")
    search_parser.add_argument("--time-limit", type=float, default=None,
                               help="Cancel the search after this many seconds.")
    search_parser.add_argument("--heartbeat", type=float, default=None, metavar="MIN",
                               help="Log the elapsed time every MIN minutes.")
    search_parser.add_argument("-v", "--verbose", action="store_true",
                               help="Enable verbose output during search.")
    search_parser.set_defaults(func=command_search)

    # golombpy table
    table_parser = subparsers.add_parser("table", help="Show the known optimal rulers")
    table_parser.add_argument("marks", type=int, nargs="?", default=None,
                              help="Only show the ruler with this number of marks.")
    table_parser.set_defaults(func=command_table)

    # golombpy version
    version_parser = subparsers.add_parser("version", help="Show version information on golombpy and its solvers")
    version_parser.set_defaults(func=command_version)

    return parser


def main(argv=None):
    parser = make_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    try:
        return args.func(args)
    except GolombException as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
