"""
Export identification results to various formats (equations, Verilog, C).
"""

from .identification import IdentificationResult
from .truth_tables import default_var_names


def _not_threshold_reason(result: IdentificationResult) -> str:
    if result.binate_var is not None:
        return f"not a threshold function (x{result.binate_var} is binate)"
    return "not a threshold function (no integer linear form exists)"


def linear_form_to_str(linear_form: list[int], var_names: list[str] = None) -> str:
    """Render a linear form as "2 x0 + x1 - x2 >= 2"."""
    *weights, threshold = linear_form
    if var_names is None:
        var_names = default_var_names(len(weights))

    terms = []
    for w, name in zip(weights, var_names):
        if w == 0:
            continue
        magnitude = "" if abs(w) == 1 else f"{abs(w)} "
        sign = "-" if w < 0 else "+"
        if not terms:
            terms.append(f"{'-' if w < 0 else ''}{magnitude}{name}")
        else:
            terms.append(f"{sign} {magnitude}{name}")

    lhs = " ".join(terms) if terms else "0"
    return f"{lhs} >= {threshold}"


def to_equations(result: IdentificationResult, var_names: list[str] = None) -> str:
    """
    Export an identification result as a human-readable summary.

    Args:
        result: The identification result
        var_names: Names for x_0..x_{n-1}

    Returns:
        Text listing unateness, cubes and the linear form
    """
    if var_names is None:
        var_names = default_var_names(result.num_vars)

    lines = []
    lines.append(f"Threshold identification ({result.num_vars} variables)")
    lines.append(f"Backend: {result.backend}")
    lines.append("")

    if result.unateness:
        lines.append("Unateness:")
        for name, positive in zip(var_names, result.unateness):
            lines.append(f"  {name:8} {'positive' if positive else 'negative'}")
        lines.append("")

    if not result.is_threshold:
        lines.append(f"Result: {_not_threshold_reason(result)}")
        return "\n".join(lines)

    if result.on_cubes or result.off_cubes:
        lines.append("Normalized cubes:")
        on = " + ".join(c.to_expr_str(var_names) for c in result.on_cubes) or "0"
        off = " + ".join(c.to_expr_str(var_names) for c in result.off_cubes) or "0"
        lines.append(f"  on:  {on}")
        lines.append(f"  off: {off}")
        lines.append("")

    lines.append(f"Linear form: {result.linear_form}")
    lines.append(f"  f = [{linear_form_to_str(result.linear_form, var_names)}]")

    return "\n".join(lines)


def to_verilog(result: IdentificationResult, module_name: str = "threshold_gate") -> str:
    """
    Export an identification result as a Verilog module.

    The module computes the weighted sum with signed arithmetic and compares
    it against the threshold.

    Args:
        result: The identification result
        module_name: Name for the Verilog module

    Returns:
        Verilog source code as string
    """
    n = result.num_vars
    lines = []
    lines.append("// Threshold logic gate")

    if not result.is_threshold:
        lines.append(f"// {_not_threshold_reason(result)}")
        return "\n".join(lines)

    lines.append(f"// Linear form: {result.linear_form}")
    lines.append("")

    weights, threshold = result.weights, result.threshold
    if n > 0:
        lines.append(f"module {module_name} (")
        lines.append(f"    input  wire [{n - 1}:0] x,")
        lines.append("    output wire f")
        lines.append(");")
    else:
        lines.append(f"module {module_name} (")
        lines.append("    output wire f")
        lines.append(");")
    lines.append("")

    terms = []
    for i, w in enumerate(weights):
        if w != 0:
            terms.append(f"({w}) * $signed({{1'b0, x[{i}]}})")

    lines.append("    // Weighted sum")
    lines.append(f"    wire signed [31:0] sum = {' + '.join(terms) if terms else '0'};")
    lines.append("")
    lines.append(f"    assign f = (sum >= {threshold});")
    lines.append("")
    lines.append("endmodule")

    return "\n".join(lines)


def to_c_code(result: IdentificationResult, function_name: str = "threshold_gate") -> str:
    """
    Export an identification result as a C function.

    Input bit i of the argument is x_i.

    Args:
        result: The identification result
        function_name: Name for the C function

    Returns:
        C source code as string
    """
    lines = []
    lines.append("/*")
    lines.append(" * Threshold logic gate")

    if not result.is_threshold:
        lines.append(f" * {_not_threshold_reason(result)}")
        lines.append(" */")
        return "\n".join(lines)

    lines.append(f" * Linear form: {result.linear_form}")
    lines.append(" */")
    lines.append("")
    lines.append("#include <stdint.h>")
    lines.append("")
    lines.append(f"uint8_t {function_name}(uint32_t x) {{")

    weights, threshold = result.weights, result.threshold
    terms = []
    for i, w in enumerate(weights):
        if w != 0:
            terms.append(f"({w}) * (int64_t)((x >> {i}) & 1)")

    lines.append(f"    int64_t sum = {' + '.join(terms) if terms else '0'};")
    lines.append(f"    return sum >= {threshold};")
    lines.append("}")

    return "\n".join(lines)


def to_inequality(result: IdentificationResult, var_names: list[str] = None) -> str:
    """One-line form: "f = [x0 + x1 >= 2]" or the reason it does not exist."""
    if not result.is_threshold:
        return f"f is {_not_threshold_reason(result)}"
    return f"f = [{linear_form_to_str(result.linear_form, var_names)}]"
