"""Threshold logic function identification using cube covers and integer programming."""

from .identification import (
    ThresholdIdentifier,
    IdentificationResult,
    is_threshold,
    weight_bound,
    THRESHOLD,
    BINATE,
    NOT_REALIZABLE,
)
from .truth_tables import TruthTable, NAMED_FUNCTIONS
from .cubes import Cube, isop, quine_mccluskey, prime_cover, extract_cover
from .lp import LPModel, PulpModel, SatModel, SolverInternalError, make_model
from .export import to_verilog, to_c_code, to_equations, to_inequality
from .verify import verify_linear_form, verify_result
from .census import count_threshold_functions, run_census

__all__ = [
    "ThresholdIdentifier",
    "IdentificationResult",
    "is_threshold",
    "weight_bound",
    "THRESHOLD",
    "BINATE",
    "NOT_REALIZABLE",
    "TruthTable",
    "NAMED_FUNCTIONS",
    "Cube",
    "isop",
    "quine_mccluskey",
    "prime_cover",
    "extract_cover",
    "LPModel",
    "PulpModel",
    "SatModel",
    "SolverInternalError",
    "make_model",
    "to_verilog",
    "to_c_code",
    "to_equations",
    "to_inequality",
    "verify_linear_form",
    "verify_result",
    "count_threshold_functions",
    "run_census",
]
__version__ = "0.1.0"
