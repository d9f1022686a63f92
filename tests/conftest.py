import pytest
import importlib.util
import logging
import warnings
from typing import Optional

import golombpy as gp

logger = logging.getLogger(__name__)


def _parse_solver_option(solver_option: Optional[str]) -> Optional[list[str]]:
    """
    Parse the --solver option into a list of engine names.
    Returns 'None' if no solver was specified, otherwise the list of supported engines among those given.
    Supports the special "all" keyword to expand to all supported engines.
    """
    if solver_option is None:
        return None

    names = [s.strip() for s in solver_option.split(",") if s.strip()]
    if not names:
        warnings.warn('--solver option set, but no solver specified. Running all supported engines.')
        return None
    if "all" in names:
        return gp.SolverLookup.supported()
    return [s for s in names if s in gp.SolverLookup.supported()]


def pytest_addoption(parser):
    """
    Adds cli arguments to the pytest command
    """
    parser.addoption(
        "--solver", type=str, action="store", default=None,
        help="Only run the engine-parametrized tests on these engines. Can be a single engine, "
             "a comma-separated list (e.g., 'sequential,parallel') or 'all'."
    )


def pytest_configure(config):
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(message)s'
    )

    config.addinivalue_line(
        "markers",
        "requires_dependency(name): mark test as requiring a specific dependency", # to skip tests when it is not installed
    )


def pytest_collection_modifyitems(config, items):
    """
    Skip tests whose dependency is missing, drop engine-parametrized tests for engines not asked for.
    """
    cmd_solvers = _parse_solver_option(config.getoption("--solver"))

    filtered = []
    for item in items:
        required_dependency_marker = item.get_closest_marker("requires_dependency")
        if required_dependency_marker:
            if not all(importlib.util.find_spec(dependency) is not None for dependency in required_dependency_marker.args):
                skip = pytest.mark.skip(reason=f"Dependency {required_dependency_marker.args} not installed")
                item.add_marker(skip)

        if cmd_solvers is not None and hasattr(item, "callspec") and "solver_name" in item.callspec.params:
            if item.callspec.params["solver_name"] not in cmd_solvers:
                continue
        filtered.append(item)

    if len(filtered) != len(items):
        logger.info(f"Deselected {len(items) - len(filtered)} tests not matching --solver")
    items[:] = filtered
