"""
Integer linear programming backends.

The identification code talks to a small model interface (columns, objective,
constraint rows, solve, read back the solution) so the backend can be
swapped without touching the encoding:

- pulp: mixed-integer program solved by CBC (bundled with PuLP) or an
  external CBC/GLPK binary
- sat: every column is a bounded integer in order (unary) encoding, rows
  become cardinality constraints, and the objective is minimized with the
  RC2 MaxSAT solver
"""

import math
import shutil
from typing import Optional

import pulp
from pysat.card import CardEnc, EncType
from pysat.examples.rc2 import RC2
from pysat.formula import WCNF
from pysat.solvers import Solver

# Relational operators for constraint rows
LE = "<="
GE = ">="
EQ = "="

# Solve status
OPTIMAL = "optimal"
INFEASIBLE = "infeasible"
UNBOUNDED = "unbounded"
NOT_SOLVED = "not_solved"

BACKENDS = ("pulp", "sat")


class SolverInternalError(RuntimeError):
    """The LP model could not be built or the solver could not be run."""


def _row_holds(lhs: float, op: str, rhs: float) -> bool:
    if op == LE:
        return lhs <= rhs
    if op == GE:
        return lhs >= rhs
    return lhs == rhs


class LPModel:
    """
    Minimal integer linear program: minimize c·x subject to rows A·x op b.

    Columns are indexed 0..num_cols-1. Rows and the objective are recorded
    as dense coefficient lists and handed to the backend on solve().
    """

    name = "abstract"

    def __init__(self, num_cols: int):
        if num_cols < 0:
            raise ValueError(f"Number of columns must be non-negative, got {num_cols}")
        self.num_cols = num_cols
        self.objective = [0] * num_cols
        self.rows: list[tuple[list, str, float]] = []
        self.integer = [False] * num_cols
        self.upper_bounds: list[Optional[int]] = [None] * num_cols
        self.status: Optional[str] = None
        self._solution: Optional[list] = None

    def _check_coeffs(self, coeffs: list) -> list:
        coeffs = list(coeffs)
        if len(coeffs) != self.num_cols:
            raise ValueError(f"Expected {self.num_cols} coefficients, got {len(coeffs)}")
        return coeffs

    def _check_col(self, col: int):
        if not 0 <= col < self.num_cols:
            raise ValueError(f"Column {col} out of range for {self.num_cols} columns")

    def set_int(self, col: int, is_int: bool = True):
        self._check_col(col)
        self.integer[col] = is_int

    def set_upper_bound(self, col: int, value: Optional[int]):
        self._check_col(col)
        self.upper_bounds[col] = value

    def set_objective(self, coeffs: list):
        """Set the coefficients of the (minimized) objective."""
        self.objective = self._check_coeffs(coeffs)

    def add_constraint(self, coeffs: list, op: str, rhs: float):
        """Add the row sum(coeffs[j] * x_j) op rhs."""
        if op not in (LE, GE, EQ):
            raise ValueError(f"Unknown relational operator: {op!r}")
        self.rows.append((self._check_coeffs(coeffs), op, rhs))

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def solve(self) -> str:  # pragma: no cover - abstract
        raise NotImplementedError

    def get_variables(self) -> list:
        """Solution vector of the last successful solve()."""
        if self._solution is None:
            raise RuntimeError(f"No solution available (status: {self.status})")
        return list(self._solution)

    def release(self):
        """Drop the model and any solver state."""
        self.rows = []
        self._solution = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


# PuLP backend

def pick_pulp_solver(msg: bool = False):
    """Pick an available MILP solver for PuLP: bundled CBC, then CBC or GLPK on PATH."""
    solver = pulp.PULP_CBC_CMD(msg=msg)
    if solver.available():
        return solver
    cbc = shutil.which("cbc")
    if cbc:
        return pulp.COIN_CMD(path=cbc, msg=msg)
    glpk = shutil.which("glpsol")
    if glpk:
        return pulp.GLPK_CMD(path=glpk, msg=msg)
    return None


def pulp_available() -> bool:
    return pick_pulp_solver() is not None


class PulpModel(LPModel):
    """Integer program solved through PuLP."""

    name = "pulp"

    _STATUS = {
        "Optimal": OPTIMAL,
        "Infeasible": INFEASIBLE,
        "Unbounded": UNBOUNDED,
    }

    def __init__(self, num_cols: int, msg: bool = False):
        super().__init__(num_cols)
        self._solver = pick_pulp_solver(msg)
        if self._solver is None:
            raise SolverInternalError("Unable to create LP model: no MILP solver found (install CBC or GLPK)")

    def solve(self) -> str:
        self._solution = None
        prob = pulp.LpProblem("threshold", pulp.LpMinimize)

        cols = [
            pulp.LpVariable(
                f"x{j}",
                upBound=self.upper_bounds[j],
                cat=pulp.LpInteger if self.integer[j] else pulp.LpContinuous,
            )
            for j in range(self.num_cols)
        ]

        prob.setObjective(pulp.lpSum(c * v for c, v in zip(self.objective, cols) if c))

        for i, (coeffs, op, rhs) in enumerate(self.rows):
            terms = [(cols[j], c) for j, c in enumerate(coeffs) if c]
            if not terms:
                # Constant row, decided without the solver
                if not _row_holds(0, op, rhs):
                    self.status = INFEASIBLE
                    return self.status
                continue

            expr = pulp.LpAffineExpression(terms)
            if op == LE:
                prob += (expr <= rhs, f"r{i}")
            elif op == GE:
                prob += (expr >= rhs, f"r{i}")
            else:
                prob += (expr == rhs, f"r{i}")

        try:
            status = prob.solve(self._solver)
        except pulp.PulpSolverError as e:
            raise SolverInternalError(f"LP solver failed: {e}") from e

        self.status = self._STATUS.get(pulp.LpStatus[status], NOT_SOLVED)
        if self.status == OPTIMAL:
            # Columns absent from every row and the objective come back as None
            self._solution = [v.value() or 0 for v in cols]
        return self.status


# SAT backend

class SatModel(LPModel):
    """
    Integer program over bounded non-negative integers solved with MaxSAT.

    Column j takes values 0..ub_j and is represented by ub_j order-encoded
    Boolean variables u_1 >= u_2 >= ... (x_j = number of true u's). A row
    sum(c_j x_j) op b becomes a cardinality constraint over those literals:
    positive coefficients contribute u's, negative ones contribute NOT u's
    plus a constant, and |c_j| > 1 repeats the literals through fresh copies.
    Objective coefficients become soft unit clauses, minimized by RC2.

    The encoding grows with the column bounds, and Muroga's weight bound grows
    super-exponentially with n, so this backend only suits functions of a few
    variables (up to about 6). Use the PuLP backend beyond that.
    """

    name = "sat"

    def __init__(self, num_cols: int, encoding: int = EncType.seqcounter):
        super().__init__(num_cols)
        self.encoding = encoding

    def solve(self) -> str:
        self._solution = None

        for j, ub in enumerate(self.upper_bounds):
            if ub is None or ub < 0:
                raise ValueError(f"SAT backend needs a non-negative upper bound on column {j}")

        wcnf = WCNF()
        var_counter = [0]

        def new_var():
            var_counter[0] += 1
            return var_counter[0]

        # x[j][k] = "column j is greater than k"
        x = [[new_var() for _ in range(ub)] for ub in self.upper_bounds]
        for units in x:
            for k in range(1, len(units)):
                wcnf.append([-units[k], units[k - 1]])

        for coeffs, op, rhs in self.rows:
            lits = []
            const = 0
            for j, c in enumerate(coeffs):
                c = _as_int(c)
                if c == 0:
                    continue
                base = x[j] if c > 0 else [-u for u in x[j]]
                if c < 0:
                    const += c * self.upper_bounds[j]
                lits.extend(base)
                for _ in range(abs(c) - 1):
                    for lit in base:
                        copy = new_var()
                        wcnf.append([-copy, lit])
                        wcnf.append([copy, -lit])
                        lits.append(copy)

            clauses = []
            feasible = True
            if op in (GE, EQ):
                feasible &= self._at_least(lits, math.ceil(rhs - const), clauses, var_counter)
            if op in (LE, EQ):
                feasible &= self._at_most(lits, math.floor(rhs - const), clauses, var_counter)
            if not feasible:
                self.status = INFEASIBLE
                return self.status
            for clause in clauses:
                wcnf.append(clause)

        for j, c in enumerate(self.objective):
            c = _as_int(c)
            for u in x[j]:
                if c > 0:
                    wcnf.append([-u], weight=c)
                elif c < 0:
                    wcnf.append([u], weight=-c)

        if wcnf.soft:
            with RC2(wcnf) as rc2:
                model = rc2.compute()
        else:
            with Solver(name="g3", bootstrap_with=wcnf.hard) as solver:
                model = solver.get_model() if solver.solve() else None

        if model is None:
            self.status = INFEASIBLE
            return self.status

        true_vars = {lit for lit in model if lit > 0}
        self._solution = [sum(1 for u in units if u in true_vars) for units in x]
        self.status = OPTIMAL
        return self.status

    def _at_least(self, lits: list[int], bound: int, clauses: list, var_counter: list) -> bool:
        if bound <= 0:
            return True
        if bound > len(lits):
            return False
        enc = CardEnc.atleast(lits=lits, bound=bound, top_id=var_counter[0], encoding=self.encoding)
        clauses.extend(enc.clauses)
        var_counter[0] = max(var_counter[0], enc.nv)
        return True

    def _at_most(self, lits: list[int], bound: int, clauses: list, var_counter: list) -> bool:
        if bound < 0:
            return False
        if bound >= len(lits):
            return True
        enc = CardEnc.atmost(lits=lits, bound=bound, top_id=var_counter[0], encoding=self.encoding)
        clauses.extend(enc.clauses)
        var_counter[0] = max(var_counter[0], enc.nv)
        return True


def _as_int(value) -> int:
    if value != int(value):
        raise ValueError(f"SAT backend supports integer coefficients only, got {value}")
    return int(value)


def make_model(num_cols: int, backend: str = "pulp") -> LPModel:
    """Create an empty model for the named backend."""
    if backend == "pulp":
        return PulpModel(num_cols)
    if backend == "sat":
        return SatModel(num_cols)
    raise ValueError(f"Unknown LP backend: {backend} (expected one of {', '.join(BACKENDS)})")
