"""
Cube covers of Boolean functions.

Two cover extractors are provided:
- isop: Minato-Morreale irredundant sum-of-products, computed recursively on
  truth tables (default)
- qm: Quine-McCluskey prime implicants followed by a greedy set cover

Either one returns a list of cubes whose union is exactly the on-set of the
function. The off-set cover is obtained by passing the complement.
"""

from dataclasses import dataclass
from typing import Optional

from .truth_tables import TruthTable, default_var_names

COVER_METHODS = ("isop", "qm")


@dataclass(frozen=True)
class Cube:
    """
    A product term over n variables.

    - mask: which variables are fixed (bit i set = x_i appears as a literal)
    - value: the fixed values for variables in the mask

    A cube with mask 0 is the constant-1 product (covers everything).
    """

    mask: int = 0
    value: int = 0

    @property
    def num_literals(self) -> int:
        """Count the number of literals in this cube."""
        return bin(self.mask).count('1')

    def get_mask(self, var: int) -> bool:
        return bool((self.mask >> var) & 1)

    def get_bit(self, var: int) -> bool:
        return bool((self.value >> var) & 1)

    def covers(self, minterm: int) -> bool:
        """Check if this cube covers a given minterm."""
        return (minterm & self.mask) == (self.value & self.mask)

    def with_literal(self, var: int, polarity: int) -> "Cube":
        """Return a copy with x_var (polarity 1) or x_var' (polarity 0) added."""
        bit = 1 << var
        value = self.value | bit if polarity else self.value & ~bit
        return Cube(mask=self.mask | bit, value=value)

    def to_table(self, num_vars: int) -> TruthTable:
        """Truth table of the product term."""
        tt = TruthTable(num_vars)
        tt.bits = sum(1 << m for m in range(1 << num_vars) if self.covers(m))
        return tt

    def to_expr_str(self, var_names: list[str] = None) -> str:
        """Convert to a product term string such as "x0 x2'"."""
        if var_names is None:
            var_names = default_var_names(self.mask.bit_length())

        literals = []
        for i, name in enumerate(var_names):
            if self.get_mask(i):
                literals.append(name if self.get_bit(i) else f"{name}'")

        return " ".join(literals) if literals else "1"

    def __repr__(self):
        return f"Cube({self.to_expr_str()})"


# ISOP

def _isop_rec(lower: TruthTable, upper: TruthTable, num_vars: int, cubes: list[Cube]) -> TruthTable:
    """
    Cover every minterm of `lower` with cubes contained in `upper`.

    Only variables below `num_vars` are considered; the cofactors passed down
    no longer depend on the variable split on. Returns the function of the
    cubes appended to `cubes`.
    """
    if lower.is_const0():
        return lower
    if upper.is_const1():
        cubes.append(Cube())
        return upper

    var = num_vars - 1
    while not lower.has_var(var) and not upper.has_var(var):
        var -= 1

    lower0, lower1 = lower.cofactor0(var), lower.cofactor1(var)
    upper0, upper1 = upper.cofactor0(var), upper.cofactor1(var)

    begin0 = len(cubes)
    res0 = _isop_rec(lower0 & ~upper1, upper0, var, cubes)
    end0 = len(cubes)
    res1 = _isop_rec(lower1 & ~upper0, upper1, var, cubes)
    end1 = len(cubes)
    res2 = _isop_rec((lower0 & ~res0) | (lower1 & ~res1), upper0 & upper1, var, cubes)

    for i in range(begin0, end0):
        cubes[i] = cubes[i].with_literal(var, 0)
    for i in range(end0, end1):
        cubes[i] = cubes[i].with_literal(var, 1)

    x = TruthTable.nth_var(lower.num_vars(), var)
    return (res0 & ~x) | (res1 & x) | res2


def isop(tt: TruthTable) -> list[Cube]:
    """
    Irredundant sum-of-products cover of a completely specified function.

    Returns an empty list for the constant-0 function and a single cube with
    no literals for the constant-1 function.
    """
    cubes = []
    _isop_rec(tt, tt, tt.num_vars(), cubes)
    return cubes


# Quine-McCluskey

def try_merge(cube1: Cube, cube2: Cube) -> Optional[Cube]:
    """
    Try to merge two cubes differing in exactly one variable.

    Two cubes can merge if:
    1. They have the same mask
    2. They differ in exactly one bit position (within the mask)

    Returns new cube with one less literal, or None if can't merge.
    """
    if cube1.mask != cube2.mask:
        return None

    diff = (cube1.value ^ cube2.value) & cube1.mask

    if bin(diff).count('1') != 1:
        return None

    new_mask = cube1.mask & ~diff
    return Cube(mask=new_mask, value=cube1.value & new_mask)


def quine_mccluskey(on_set: set[int], n_vars: int) -> list[Cube]:
    """
    Run Quine-McCluskey algorithm to find all prime implicants.

    Args:
        on_set: Set of minterms where function is 1
        n_vars: Number of input variables

    Returns:
        List of prime implicants of the function
    """
    full_mask = (1 << n_vars) - 1

    current = {Cube(mask=full_mask, value=m) for m in on_set}
    primes = []

    while current:
        next_gen = set()
        used = set()

        cube_list = sorted(current, key=lambda c: (c.mask, c.value))

        for i, cube1 in enumerate(cube_list):
            for cube2 in cube_list[i + 1:]:
                merged = try_merge(cube1, cube2)
                if merged:
                    next_gen.add(merged)
                    used.add(cube1)
                    used.add(cube2)

        primes.extend(c for c in cube_list if c not in used)
        current = next_gen

    return primes


def greedy_cover(primes: list[Cube], minterms: set[int]) -> list[Cube]:
    """
    Greedy set cover selecting cubes until every minterm is covered.

    Prefers the cube covering the most uncovered minterms per literal.
    """
    uncovered = set(minterms)
    selected = []

    while uncovered:
        best_cube = None
        best_ratio = -1
        best_covers = set()

        for cube in primes:
            if cube in selected:
                continue

            covers = {m for m in uncovered if cube.covers(m)}
            if not covers:
                continue

            cost = cube.num_literals if cube.num_literals > 0 else 1
            ratio = len(covers) / cost

            if ratio > best_ratio:
                best_ratio = ratio
                best_cube = cube
                best_covers = covers

        if best_cube is None:
            remaining = sorted(uncovered)
            raise RuntimeError(f"Cannot cover: {remaining[:5]}...")

        selected.append(best_cube)
        uncovered -= best_covers

    return selected


def prime_cover(tt: TruthTable) -> list[Cube]:
    """Prime cube cover via Quine-McCluskey and greedy selection."""
    on_set = set(tt.minterms())
    primes = quine_mccluskey(on_set, tt.num_vars())
    return greedy_cover(primes, on_set)


def extract_cover(tt: TruthTable, method: str = "isop") -> list[Cube]:
    """Cube cover of the on-set of `tt` using the named method."""
    if method == "isop":
        return isop(tt)
    if method == "qm":
        return prime_cover(tt)
    raise ValueError(f"Unknown cover method: {method} (expected one of {', '.join(COVER_METHODS)})")


def cover_to_table(cubes: list[Cube], num_vars: int) -> TruthTable:
    """Truth table of the sum of the given cubes."""
    tt = TruthTable(num_vars)
    for cube in cubes:
        tt = tt | cube.to_table(num_vars)
    return tt

