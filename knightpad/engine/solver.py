"""CP-SAT sequence enumeration using OR-Tools.

Models a sequence of presses as one integer variable per press and counts
every feasible assignment. This is independent of the memoized counter and
is used to cross-check it for short lengths.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from ortools.sat.python import cp_model

from ..core.constants import DEFAULT_VOWEL_BUDGET
from ..core.exceptions import SolverError
from .keypad import Keypad, default_keypad
from ..utils.logger import get_logger

LOGGER = get_logger(__name__)


class _SolutionCounter(cp_model.CpSolverSolutionCallback):
    """Counts solutions as the solver reports them."""

    def __init__(self) -> None:
        super().__init__()
        self.solutions = 0

    def on_solution_callback(self) -> None:
        self.solutions += 1


def build_sequence_model(
    length: int,
    keypad: Keypad,
    vowel_budget: int = DEFAULT_VOWEL_BUDGET,
) -> Tuple[cp_model.CpModel, List[cp_model.IntVar]]:
    """Build the CP-SAT model whose solutions are the valid sequences.

    Args:
        length: Number of presses; must be positive.
        keypad: Keypad supplying key indices, knight edges and vowels.
        vowel_budget: Maximum number of vowel presses in a sequence.

    Returns:
        The model and the per-press key variables.
    """
    model = cp_model.CpModel()
    last = len(keypad) - 1

    # ------------------------------------------------------------------
    # Step 1: One key variable and one vowel flag per press
    # ------------------------------------------------------------------
    presses = [model.new_int_var(0, last, f"press_{i}") for i in range(length)]
    vowel_flags = [model.new_bool_var(f"vowel_{i}") for i in range(length)]
    vowel_table = [[index, int(keypad.is_vowel_index(index))] for index in range(len(keypad))]
    for press, flag in zip(presses, vowel_flags):
        model.add_allowed_assignments([press, flag], vowel_table)

    # ------------------------------------------------------------------
    # Step 2: Consecutive presses must be a knight move apart
    # ------------------------------------------------------------------
    edges = [list(edge) for edge in keypad.edges()]
    for current, following in zip(presses, presses[1:]):
        model.add_allowed_assignments([current, following], edges)

    # ------------------------------------------------------------------
    # Step 3: Vowel budget
    # ------------------------------------------------------------------
    model.add(sum(vowel_flags) <= max(0, vowel_budget))
    return model, presses


def count_with_solver(
    length: int,
    *,
    keypad: Optional[Keypad] = None,
    vowel_budget: int = DEFAULT_VOWEL_BUDGET,
    timeout: float = 60.0,
) -> int:
    """Count valid sequences by enumerating every CP-SAT solution.

    Lengths of zero or less count the empty sequence only and return 1.
    Enumeration grows with the answer itself, so keep ``length`` small.

    Raises:
        SolverError: If the enumeration does not finish within ``timeout``.
    """
    if length <= 0:
        return 1

    keypad = keypad if keypad is not None else default_keypad()
    model, _ = build_sequence_model(length, keypad, vowel_budget)

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = timeout
    solver.parameters.enumerate_all_solutions = True
    solver.parameters.num_workers = 1

    LOGGER.info("CP-SAT: enumerating sequences of length %d (timeout=%0.1fs)...", length, timeout)
    callback = _SolutionCounter()
    status = solver.solve(model, callback)

    if status == cp_model.INFEASIBLE:
        LOGGER.info("CP-SAT: no sequences of length %d", length)
        return 0
    if status != cp_model.OPTIMAL:
        LOGGER.warning(
            "CP-SAT: enumeration incomplete after %d solutions (status=%s)",
            callback.solutions,
            solver.status_name(status),
        )
        raise SolverError(
            f"Enumeration for length {length} stopped early with status {solver.status_name(status)}"
        )

    LOGGER.info("CP-SAT: %d sequences enumerated in %.2fs", callback.solutions, solver.wall_time)
    return callback.solutions
