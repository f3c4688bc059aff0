"""
Truth tables for completely specified Boolean functions.

A table over n variables stores its 2^n output bits in one Python integer.
Bit k holds f at the assignment where variable i equals bit i of k, so
variable 0 is the least significant input:

    n = 2, f = x0 AND x1

    minterm | x1 x0 | f
    --------+-------+--
       0    |  0  0 | 0
       1    |  0  1 | 0
       2    |  1  0 | 0
       3    |  1  1 | 1      -> bits = 0b1000

Binary and hex strings are read most significant minterm first, so the
table above is "1000" in binary and "8" in hex.
"""

from typing import Callable, Iterable

# Functions used by the CLI and tests, as binary strings (MSB = highest minterm)
NAMED_FUNCTIONS = {
    'const0': (0, "0"),
    'const1': (0, "1"),
    'buf': (1, "10"),
    'not': (1, "01"),
    'and2': (2, "1000"),
    'or2': (2, "1110"),
    'nand2': (2, "0111"),
    'nor2': (2, "0001"),
    'xor2': (2, "0110"),
    'xnor2': (2, "1001"),
    'andn2': (2, "0100"),   # NOT x0 AND x1
    'maj3': (3, "11101000"),
    'and3': (3, "10000000"),
    'or3': (3, "11111110"),
    'xor3': (3, "10010110"),
    'mux': (3, "11001010"),  # x2 ? x1 : x0
}


def _var_mask(num_vars: int, var: int) -> int:
    """Bit mask of the minterms in which `var` is 1."""
    shift = 1 << var
    mask = ((1 << shift) - 1) << shift
    width = shift << 1
    total = 1 << num_vars
    while width < total:
        mask |= mask << width
        width <<= 1
    return mask


class TruthTable:
    """
    Truth table of a completely specified Boolean function.

    Supports the operations the identification algorithm needs (cofactors,
    complement, in-place polarity flip) plus construction and evaluation
    helpers.
    """

    __slots__ = ('_num_vars', 'bits')

    def __init__(self, num_vars: int, bits: int = 0):
        if num_vars < 0:
            raise ValueError(f"Number of variables must be non-negative, got {num_vars}")
        self._num_vars = num_vars
        self.bits = bits & self.full_mask

    # Construction

    @classmethod
    def from_binary(cls, text: str) -> "TruthTable":
        """Build a table from a binary string, highest minterm first."""
        text = text.strip().replace("_", "")
        length = len(text)
        if length == 0 or length & (length - 1):
            raise ValueError(f"Binary truth table length must be a power of two, got {length}")
        if set(text) - {"0", "1"}:
            raise ValueError(f"Invalid binary truth table: {text!r}")
        return cls(length.bit_length() - 1, int(text, 2))

    @classmethod
    def from_hex(cls, text: str, num_vars: int = None) -> "TruthTable":
        """
        Build a table from a hex string, highest minterm first.

        Args:
            text: Hex digits, optionally prefixed with 0x
            num_vars: Number of variables; inferred from the string length
                when omitted (4 bits per digit, so at least 2 variables)
        """
        text = text.strip().lower()
        if text.startswith("0x"):
            text = text[2:]
        try:
            bits = int(text, 16)
        except ValueError:
            raise ValueError(f"Invalid hex truth table: {text!r}") from None

        if num_vars is None:
            digits = len(text)
            if digits & (digits - 1):
                raise ValueError(f"Hex truth table length must be a power of two, got {digits}")
            num_vars = (digits * 4).bit_length() - 1
        if bits >> (1 << num_vars):
            raise ValueError(f"Hex truth table {text!r} has more than {1 << num_vars} bits")
        return cls(num_vars, bits)

    @classmethod
    def from_minterms(cls, num_vars: int, minterms: Iterable[int]) -> "TruthTable":
        """Build a table whose on-set is the given minterms."""
        tt = cls(num_vars)
        for m in minterms:
            if not 0 <= m < (1 << num_vars):
                raise ValueError(f"Minterm {m} out of range for {num_vars} variables")
            tt.bits |= 1 << m
        return tt

    @classmethod
    def from_function(cls, num_vars: int, func: Callable[..., int]) -> "TruthTable":
        """Build a table by calling `func(x0, x1, ...)` on every assignment."""
        tt = cls(num_vars)
        for m in range(1 << num_vars):
            args = [(m >> i) & 1 for i in range(num_vars)]
            if func(*args):
                tt.bits |= 1 << m
        return tt

    @classmethod
    def nth_var(cls, num_vars: int, var: int) -> "TruthTable":
        """Projection function x_var."""
        if not 0 <= var < num_vars:
            raise ValueError(f"Variable {var} out of range for {num_vars} variables")
        return cls(num_vars, _var_mask(num_vars, var))

    @classmethod
    def const(cls, num_vars: int, value: int) -> "TruthTable":
        tt = cls(num_vars)
        if value:
            tt.bits = tt.full_mask
        return tt

    @classmethod
    def named(cls, name: str) -> "TruthTable":
        """Look up one of NAMED_FUNCTIONS."""
        if name not in NAMED_FUNCTIONS:
            raise ValueError(f"Unknown function name: {name}")
        num_vars, text = NAMED_FUNCTIONS[name]
        return cls(num_vars, int(text, 2))

    # Basic properties

    def num_vars(self) -> int:
        return self._num_vars

    def num_bits(self) -> int:
        return 1 << self._num_vars

    @property
    def full_mask(self) -> int:
        return (1 << (1 << self._num_vars)) - 1

    def copy(self) -> "TruthTable":
        return TruthTable(self._num_vars, self.bits)

    def get_bit(self, minterm: int) -> int:
        return (self.bits >> minterm) & 1

    def evaluate(self, *inputs: int) -> int:
        """Evaluate f(x0, x1, ...)."""
        if len(inputs) != self._num_vars:
            raise ValueError(f"Expected {self._num_vars} inputs, got {len(inputs)}")
        minterm = 0
        for i, x in enumerate(inputs):
            if x:
                minterm |= 1 << i
        return self.get_bit(minterm)

    def minterms(self) -> list[int]:
        """On-set minterms in increasing order."""
        return [m for m in range(self.num_bits()) if (self.bits >> m) & 1]

    def count_ones(self) -> int:
        return bin(self.bits).count('1')

    def is_const0(self) -> bool:
        return self.bits == 0

    def is_const1(self) -> bool:
        return self.bits == self.full_mask

    # Boolean operations

    def _check_compatible(self, other: "TruthTable"):
        if self._num_vars != other._num_vars:
            raise ValueError(
                f"Truth tables have different variable counts: "
                f"{self._num_vars} and {other._num_vars}"
            )

    def __and__(self, other: "TruthTable") -> "TruthTable":
        self._check_compatible(other)
        return TruthTable(self._num_vars, self.bits & other.bits)

    def __or__(self, other: "TruthTable") -> "TruthTable":
        self._check_compatible(other)
        return TruthTable(self._num_vars, self.bits | other.bits)

    def __xor__(self, other: "TruthTable") -> "TruthTable":
        self._check_compatible(other)
        return TruthTable(self._num_vars, self.bits ^ other.bits)

    def __invert__(self) -> "TruthTable":
        return TruthTable(self._num_vars, ~self.bits & self.full_mask)

    def __eq__(self, other):
        if not isinstance(other, TruthTable):
            return NotImplemented
        return self._num_vars == other._num_vars and self.bits == other.bits

    def __hash__(self):
        return hash((self._num_vars, self.bits))

    # Cofactors and polarity

    def _check_var(self, var: int):
        if not 0 <= var < self._num_vars:
            raise ValueError(f"Variable {var} out of range for {self._num_vars} variables")

    def cofactor0(self, var: int) -> "TruthTable":
        """
        Negative cofactor f|var=0, as a table over the same variables.

        The result no longer depends on `var`: both halves of every pair of
        minterms differing in `var` hold the value f had with var = 0.
        """
        self._check_var(var)
        shift = 1 << var
        d = self.bits & ~_var_mask(self._num_vars, var)
        return TruthTable(self._num_vars, d | (d << shift))

    def cofactor1(self, var: int) -> "TruthTable":
        """Positive cofactor f|var=1, as a table over the same variables."""
        self._check_var(var)
        shift = 1 << var
        d = self.bits & _var_mask(self._num_vars, var)
        return TruthTable(self._num_vars, d | (d >> shift))

    def has_var(self, var: int) -> bool:
        """Check whether the function depends on `var`."""
        self._check_var(var)
        shift = 1 << var
        mask = _var_mask(self._num_vars, var)
        return ((self.bits & mask) >> shift) != (self.bits & ~mask & self.full_mask)

    def flip_inplace(self, var: int):
        """Replace f(.., x_var, ..) by f(.., NOT x_var, ..) in place."""
        self._check_var(var)
        shift = 1 << var
        mask = _var_mask(self._num_vars, var)
        hi = self.bits & mask
        lo = self.bits & ~mask & self.full_mask
        self.bits = (hi >> shift) | (lo << shift)

    def flip(self, var: int) -> "TruthTable":
        tt = self.copy()
        tt.flip_inplace(var)
        return tt

    # Formatting

    def to_binary(self) -> str:
        return format(self.bits, f"0{self.num_bits()}b")

    def to_hex(self) -> str:
        digits = max(1, self.num_bits() // 4)
        return format(self.bits, f"0{digits}x")

    def __repr__(self):
        return f"TruthTable({self._num_vars}, 0b{self.to_binary()})"

    def __str__(self):
        return self.to_binary()


def minterm_to_bits(minterm: int, num_vars: int) -> tuple[int, ...]:
    """Convert a minterm index to its input assignment (x0, x1, ...)."""
    return tuple((minterm >> i) & 1 for i in range(num_vars))


def bits_to_minterm(bits: Iterable[int]) -> int:
    """Convert an input assignment (x0, x1, ...) to its minterm index."""
    minterm = 0
    for i, x in enumerate(bits):
        if x:
            minterm |= 1 << i
    return minterm


def default_var_names(num_vars: int) -> list[str]:
    return [f"x{i}" for i in range(num_vars)]


def print_truth_table(tt: TruthTable, var_names: list[str] = None):
    """Print the complete truth table of a function."""
    n = tt.num_vars()
    if var_names is None:
        var_names = default_var_names(n)

    header = " ".join(f"{name:>3}" for name in reversed(var_names))
    width = max(20, len(header) + 16)
    print(f"Truth Table ({n} variables)")
    print("=" * width)
    print(f"{'Row':>5} | {header} | f")
    print("-" * width)

    for m in range(tt.num_bits()):
        bits = minterm_to_bits(m, n)
        row = " ".join(f"{b:>3}" for b in reversed(bits))
        print(f"{m:>5} | {row} | {tt.get_bit(m)}")
