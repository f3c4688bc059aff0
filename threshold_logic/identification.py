"""
Threshold logic function identification.

A Boolean function f(x_0, ..., x_{n-1}) is a threshold function if there are
integer weights w_i and a threshold T with

    f(x) = 1  <=>  sum(w_i * x_i) >= T

The identification runs in phases:
1. Unateness check: every variable must be positive or negative unate; a
   binate variable rules the function out immediately
2. Normalization: negative unate variables are flipped so the working copy
   is monotone non-decreasing in every variable
3. Cube extraction: cube covers of the on-set and the off-set
4. Encoding: one inequality per cube over the weights and the threshold
5. Solving the integer program
6. Decoding the solution back into the caller's variable polarity
"""

import math
from dataclasses import dataclass, field
from typing import Optional

from .cubes import COVER_METHODS, Cube, extract_cover
from .lp import BACKENDS, GE, LE, OPTIMAL, LPModel, make_model
from .truth_tables import TruthTable

# Identification status
THRESHOLD = "threshold"
BINATE = "binate"
NOT_REALIZABLE = "infeasible"


@dataclass
class IdentificationResult:
    """Result of threshold identification for one function."""

    status: str
    num_vars: int
    linear_form: Optional[list[int]] = None  # weights followed by the threshold
    unateness: list[bool] = field(default_factory=list)  # True = positive unate
    binate_var: Optional[int] = None
    on_cubes: list[Cube] = field(default_factory=list)   # normalized polarity
    off_cubes: list[Cube] = field(default_factory=list)
    backend: str = ""
    lp_status: Optional[str] = None

    @property
    def is_threshold(self) -> bool:
        return self.status == THRESHOLD

    @property
    def weights(self) -> Optional[list[int]]:
        if self.linear_form is None:
            return None
        return self.linear_form[:-1]

    @property
    def threshold(self) -> Optional[int]:
        if self.linear_form is None:
            return None
        return self.linear_form[-1]

    @property
    def flipped_vars(self) -> list[int]:
        return [i for i, positive in enumerate(self.unateness) if not positive]


def weight_bound(num_vars: int) -> int:
    """
    Muroga's bound on the weights of an integer threshold realization.

    Every threshold function of n variables has a realization with
    |w_i| <= (n+1)^((n+1)/2) / 2^n; this returns the ceiling of that value.
    """
    n = num_vars
    radicand = (n + 1) ** (n + 1)
    root = math.isqrt(radicand)
    if root * root < radicand:
        root += 1
    return max(1, -(-root // (1 << n)))


class ThresholdIdentifier:
    """
    Decides whether a truth table is a threshold function.

    The truth table only needs num_vars(), cofactor0(i), cofactor1(i),
    copy(), complement (~) and flip_inplace(i); cube extraction additionally
    relies on the TruthTable operations used by the cover routines.

    Args:
        backend: Integer programming backend ("pulp" or "sat")
        cover: Cube cover method ("isop" or "qm")
        verbose: Print progress for every phase
        max_weight: Upper bound on every weight; Muroga's bound for the
            number of variables when omitted
    """

    def __init__(self, backend: str = "pulp", cover: str = "isop", verbose: bool = False,
                 max_weight: Optional[int] = None):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown LP backend: {backend} (expected one of {', '.join(BACKENDS)})")
        if cover not in COVER_METHODS:
            raise ValueError(f"Unknown cover method: {cover} (expected one of {', '.join(COVER_METHODS)})")
        if max_weight is not None and max_weight < 1:
            raise ValueError(f"max_weight must be positive, got {max_weight}")
        self.backend = backend
        self.cover = cover
        self.verbose = verbose
        self.max_weight = max_weight

    def _log(self, message: str):
        if self.verbose:
            print(message, flush=True)

    def classify_unateness(self, tt: TruthTable) -> tuple[list[bool], Optional[int]]:
        """
        Phase 1: Classify every variable as positive or negative unate.

        Compares the cofactor pair of each variable over all assignments:
        an assignment with f|x=1 = 1 and f|x=0 = 0 is positive evidence, the
        opposite is negative evidence. Stops at the first variable with both.

        Returns:
            Tuple of (unateness so far, index of the binate variable or None)
        """
        unateness = []

        for i in range(tt.num_vars()):
            cof1 = tt.cofactor1(i)
            cof0 = tt.cofactor0(i)

            pos_unate = (cof1.bits & ~cof0.bits) != 0
            neg_unate = (cof0.bits & ~cof1.bits) != 0

            if pos_unate and neg_unate:
                self._log(f"  x{i}: binate")
                return unateness, i

            # A variable the function ignores counts as positive unate
            unateness.append(not neg_unate)
            self._log(f"  x{i}: {'negative' if neg_unate else 'positive'} unate")

        return unateness, None

    def normalize(self, tt: TruthTable, unateness: list[bool]) -> TruthTable:
        """Phase 2: Flip every negative unate variable of `tt` in place."""
        for i, positive in enumerate(unateness):
            if not positive:
                tt.flip_inplace(i)
        return tt

    def extract_cubes(self, tt: TruthTable) -> tuple[list[Cube], list[Cube]]:
        """Phase 3: Cube covers of the on-set and the off-set."""
        on_cubes = extract_cover(tt, self.cover)
        off_cubes = extract_cover(~tt, self.cover)
        return on_cubes, off_cubes

    def encode(self, num_vars: int, on_cubes: list[Cube], off_cubes: list[Cube]) -> LPModel:
        """
        Phase 4: Build the integer program for a monotone function.

        Columns 0..n-1 are the weights, column n is the threshold T.
        - minimize sum of all columns
        - every column integer and >= 0
        - T <= sum(w) when the on-set is not empty
        - on-set cube: weights of its positive literals sum to >= T
        - off-set cube: weights of every variable not fixed to 0 sum to <= T - 1
          (the largest point of the cube must stay below the threshold)
        """
        n = num_vars
        max_weight = self.max_weight or weight_bound(n)

        model = make_model(n + 1, self.backend)
        model.set_objective([1] * (n + 1))

        for j in range(n + 1):
            model.set_int(j)
            model.set_upper_bound(j, max_weight if j < n else max(1, n * max_weight))

        # W_i >= 0 and T >= 0
        for j in range(n + 1):
            row = [0] * (n + 1)
            row[j] = 1
            model.add_constraint(row, GE, 0)

        # The constant-0 function has T above every reachable sum
        if on_cubes:
            model.add_constraint([1] * n + [-1], GE, 0)

        for cube in on_cubes:
            row = [1 if cube.get_mask(i) and cube.get_bit(i) else 0 for i in range(n)]
            model.add_constraint(row + [-1], GE, 0)

        for cube in off_cubes:
            row = [0 if cube.get_mask(i) and not cube.get_bit(i) else 1 for i in range(n)]
            model.add_constraint(row + [-1], LE, -1)

        return model

    def decode(self, solution: list, unateness: list[bool]) -> list[int]:
        """
        Phase 6: Map a solution of the normalized function back.

        A flipped variable x_i was replaced by NOT x_i, so its weight w_i
        becomes -w_i and the threshold drops by w_i.
        """
        linear_form = [int(round(v)) for v in solution]
        n = len(unateness)

        for i, positive in enumerate(unateness):
            if not positive:
                weight = linear_form[i]
                linear_form[i] = -weight
                linear_form[n] -= weight

        return linear_form

    def identify(self, tt: TruthTable) -> IdentificationResult:
        """
        Run the full identification on `tt`.

        The caller's table is never modified; all work happens on a copy.

        Raises:
            SolverInternalError: the LP model could not be built or solved
        """
        n = tt.num_vars()
        work = tt.copy()

        self._log(f"Phase 1: Unateness check ({n} variables)...")
        unateness, binate_var = self.classify_unateness(work)
        if binate_var is not None:
            self._log(f"  Not a threshold function (x{binate_var} is binate)")
            return IdentificationResult(
                status=BINATE,
                num_vars=n,
                unateness=unateness,
                binate_var=binate_var,
                backend=self.backend,
            )

        self._log("Phase 2: Normalizing polarity...")
        self.normalize(work, unateness)
        flipped = [i for i, positive in enumerate(unateness) if not positive]
        self._log(f"  Flipped: {', '.join(f'x{i}' for i in flipped) if flipped else 'none'}")

        self._log(f"Phase 3: Extracting cubes ({self.cover})...")
        on_cubes, off_cubes = self.extract_cubes(work)
        self._log(f"  On-set cubes: {len(on_cubes)}, off-set cubes: {len(off_cubes)}")

        self._log(f"Phase 4: Encoding integer program ({self.backend})...")
        with self.encode(n, on_cubes, off_cubes) as model:
            self._log(f"  {model.num_cols} columns, {model.num_rows} rows")

            self._log("Phase 5: Solving...")
            lp_status = model.solve()
            self._log(f"  Solver status: {lp_status}")

            result = IdentificationResult(
                status=NOT_REALIZABLE,
                num_vars=n,
                unateness=unateness,
                on_cubes=on_cubes,
                off_cubes=off_cubes,
                backend=self.backend,
                lp_status=lp_status,
            )
            if lp_status != OPTIMAL:
                self._log("  Not a threshold function (integer program infeasible)")
                return result

            solution = model.get_variables()

        self._log("Phase 6: Decoding linear form...")
        result.linear_form = self.decode(solution, unateness)
        result.status = THRESHOLD
        self._log(f"  Linear form: {result.linear_form}")
        return result


def is_threshold(tt: TruthTable, linear_form: Optional[list[int]] = None, *,
                 backend: str = "pulp", cover: str = "isop") -> bool:
    """
    Check whether `tt` is a threshold function.

    Args:
        tt: The truth table
        linear_form: Optional list that receives [w_0, ..., w_{n-1}, T] when
            `tt` is a threshold function; left untouched otherwise
        backend: Integer programming backend ("pulp" or "sat")
        cover: Cube cover method ("isop" or "qm")

    Returns:
        True if `tt` is a threshold function
    """
    result = ThresholdIdentifier(backend=backend, cover=cover).identify(tt)
    if not result.is_threshold:
        return False

    if linear_form is not None:
        linear_form[:] = result.linear_form
    return True
