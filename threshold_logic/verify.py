"""
Verification of linear forms against truth tables.

Ensures a linear form [w_0, ..., w_{n-1}, T] reproduces the function on all
2^n input assignments.
"""

from .truth_tables import TruthTable, minterm_to_bits
from .identification import IdentificationResult


def evaluate_linear_form(linear_form: list[int], minterm: int) -> int:
    """Evaluate sum(w_i * x_i) >= T on the assignment encoded by `minterm`."""
    *weights, threshold = linear_form
    total = sum(w for i, w in enumerate(weights) if (minterm >> i) & 1)
    return 1 if total >= threshold else 0


def linear_form_to_table(linear_form: list[int]) -> TruthTable:
    """Truth table of the threshold function defined by a linear form."""
    n = len(linear_form) - 1
    if n < 0:
        raise ValueError("Linear form needs at least a threshold value")
    return TruthTable.from_minterms(
        n, (m for m in range(1 << n) if evaluate_linear_form(linear_form, m))
    )


def verify_linear_form(tt: TruthTable, linear_form: list[int]) -> tuple[bool, list[str]]:
    """
    Verify that a linear form realizes `tt` on every input assignment.

    Args:
        tt: The truth table
        linear_form: Weights followed by the threshold

    Returns:
        Tuple of (all_correct, list of error messages)
    """
    n = tt.num_vars()
    if len(linear_form) != n + 1:
        raise ValueError(f"Linear form for {n} variables needs {n + 1} values, got {len(linear_form)}")

    errors = []

    for m in range(tt.num_bits()):
        expected = tt.get_bit(m)
        actual = evaluate_linear_form(linear_form, m)

        if actual != expected:
            bits = "".join(str(b) for b in reversed(minterm_to_bits(m, n)))
            errors.append(f"Minterm {m} ({bits}): expected {expected}, got {actual}")

    return len(errors) == 0, errors


def verify_result(tt: TruthTable, result: IdentificationResult) -> tuple[bool, list[str]]:
    """Verify an identification result; results without a linear form pass vacuously."""
    if result.linear_form is None:
        return True, []
    return verify_linear_form(tt, result.linear_form)


def print_truth_table_comparison(tt: TruthTable, linear_form: list[int]):
    """Print truth table comparing expected outputs with the linear form."""
    n = tt.num_vars()
    *weights, threshold = linear_form

    print("Truth Table Verification")
    print("=" * 60)
    print(f"{'Row':>5} | {'Inputs':>{max(6, n)}} | {'Sum':>5} | Expected | Actual | Match")
    print("-" * 60)

    all_match = True

    for m in range(tt.num_bits()):
        bits = minterm_to_bits(m, n)
        total = sum(w * b for w, b in zip(weights, bits))
        expected = tt.get_bit(m)
        actual = 1 if total >= threshold else 0
        if actual != expected:
            all_match = False

        inputs = "".join(str(b) for b in reversed(bits))
        match_str = "." if actual == expected else "X"
        print(f"{m:>5} | {inputs:>{max(6, n)}} | {total:>5} | {expected:>8} | {actual:>6} | {match_str}")

    print("-" * 60)
    print(f"Threshold: {threshold}")
    print(f"All correct: {all_match}")
    return all_match
