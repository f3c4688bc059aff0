import pytest

from threshold_logic.identification import (
    BINATE,
    NOT_REALIZABLE,
    THRESHOLD,
    ThresholdIdentifier,
    is_threshold,
    weight_bound,
)
import threshold_logic.lp as lp
from threshold_logic.lp import GE, LE, SolverInternalError
from threshold_logic.truth_tables import TruthTable
from threshold_logic.verify import linear_form_to_table, verify_linear_form


def identify(tt, backend, cover="isop"):
    return ThresholdIdentifier(backend=backend, cover=cover).identify(tt)


def test_and(backend):
    result = identify(TruthTable.named("and2"), backend)
    assert result.status == THRESHOLD
    assert result.linear_form == [1, 1, 2]


def test_or(backend):
    plf = []
    assert is_threshold(TruthTable.named("or2"), plf, backend=backend)
    assert plf == [1, 1, 1]


def test_identity(backend):
    plf = []
    assert is_threshold(TruthTable.named("buf"), plf, backend=backend)
    assert plf == [1, 1]


def test_xor_is_binate(backend):
    plf = [42]
    assert not is_threshold(TruthTable.named("xor2"), plf, backend=backend)
    assert plf == [42]

    result = identify(TruthTable.named("xor2"), backend)
    assert result.status == BINATE
    assert result.binate_var == 0
    assert result.linear_form is None
    assert result.on_cubes == [] and result.off_cubes == []


def test_binate_stops_at_first_binate_variable(backend):
    # x2 ? x1 : x0 is positive unate in x0 and x1, binate in x2
    result = identify(TruthTable.named("mux"), backend)
    assert result.status == BINATE
    assert result.binate_var == 2
    assert result.unateness == [True, True]


def test_negative_unate_variable(backend):
    tt = TruthTable.named("andn2")  # NOT x0 AND x1
    result = identify(tt, backend)
    assert result.status == THRESHOLD
    assert result.unateness == [False, True]
    assert result.flipped_vars == [0]
    assert result.linear_form == [-1, 1, 1]
    assert result.weights == [-1, 1]
    assert result.threshold == 1
    assert verify_linear_form(tt, result.linear_form) == (True, [])


def test_input_table_is_not_modified(backend):
    tt = TruthTable.named("andn2")
    identify(tt, backend)
    assert tt == TruthTable.named("andn2")


@pytest.mark.parametrize("num_vars", [0, 2, 3])
def test_constant_functions(backend, num_vars):
    zero = identify(TruthTable.const(num_vars, 0), backend)
    assert zero.status == THRESHOLD
    assert zero.on_cubes == []
    assert zero.linear_form == [0] * num_vars + [1]

    one = identify(TruthTable.const(num_vars, 1), backend)
    assert one.status == THRESHOLD
    assert one.off_cubes == []
    assert one.linear_form == [0] * num_vars + [0]


def test_majority(backend):
    result = identify(TruthTable.named("maj3"), backend)
    assert result.linear_form == [1, 1, 1, 2]


def test_unate_function_that_is_not_threshold(backend):
    tt = TruthTable.from_function(4, lambda a, b, c, d: (a and b) or (c and d))
    result = identify(tt, backend)
    assert result.status == NOT_REALIZABLE
    assert result.binate_var is None
    assert result.unateness == [True] * 4
    assert result.linear_form is None
    assert not is_threshold(tt, backend=backend)


@pytest.mark.parametrize("linear_form", [
    [3, 2, 1, 1, 4],
    [2, -1, 1, -3, 0],
    [-1, -1, -1, -1, -2],
    [5, 3, 3, 2, 1, 8],
    [1, 0, -2, 4, 1, 2],
])
def test_round_trip_of_known_threshold_functions(backend, linear_form):
    tt = linear_form_to_table(linear_form)
    plf = []
    assert is_threshold(tt, plf, backend=backend)
    assert len(plf) == tt.num_vars() + 1
    assert verify_linear_form(tt, plf) == (True, [])


def test_round_trip_of_every_2_input_function(backend):
    for bits in range(16):
        tt = TruthTable(2, bits)
        result = identify(tt, backend)
        if bits in (0b0110, 0b1001):
            assert result.status == BINATE
        else:
            assert result.status == THRESHOLD
            assert verify_linear_form(tt, result.linear_form) == (True, [])


def test_cover_methods_agree():
    for bits in range(256):
        tt = TruthTable(3, bits)
        isop_result = identify(tt, "sat", "isop")
        qm_result = identify(tt, "sat", "qm")
        assert isop_result.status == qm_result.status
        if qm_result.is_threshold:
            assert verify_linear_form(tt, qm_result.linear_form) == (True, [])


def test_classify_unateness():
    identifier = ThresholdIdentifier(backend="sat")
    assert identifier.classify_unateness(TruthTable.named("maj3")) == ([True] * 3, None)
    assert identifier.classify_unateness(TruthTable.named("nor2")) == ([False, False], None)
    assert identifier.classify_unateness(TruthTable.const(2, 1)) == ([True, True], None)
    assert identifier.classify_unateness(TruthTable.named("xor3")) == ([], 0)


def test_normalize_flips_negative_variables():
    identifier = ThresholdIdentifier(backend="sat")
    tt = TruthTable.named("nor2")
    identifier.normalize(tt, [False, False])
    assert tt == TruthTable.named("and2")


def test_encode_rows():
    identifier = ThresholdIdentifier(backend="sat")
    tt = TruthTable.named("and2")
    on_cubes, off_cubes = identifier.extract_cubes(tt)
    model = identifier.encode(2, on_cubes, off_cubes)

    # 3 non-negativity rows, T <= sum(w), 1 on-set cube, 2 off-set cubes
    assert model.num_rows == 7
    assert model.objective == [1, 1, 1]
    assert all(model.integer)
    assert ([1, 1, -1], GE, 0) in model.rows
    assert ([0, 1, -1], LE, -1) in model.rows
    assert ([1, 0, -1], LE, -1) in model.rows


def test_encode_without_on_set_skips_structural_row():
    identifier = ThresholdIdentifier(backend="sat")
    on_cubes, off_cubes = identifier.extract_cubes(TruthTable.const(2, 0))
    model = identifier.encode(2, on_cubes, off_cubes)
    assert model.num_rows == 4
    assert ([1, 1, -1], GE, 0) not in model.rows
    assert ([1, 1, -1], LE, -1) in model.rows


def test_decode():
    identifier = ThresholdIdentifier(backend="sat")
    assert identifier.decode([1.0, 1.0, 2.0], [False, True]) == [-1, 1, 1]
    assert identifier.decode([2, 1, 3, 4], [False, False, True]) == [-2, -1, 3, 1]


@pytest.mark.parametrize("num_vars,expected", [(0, 1), (1, 1), (2, 2), (3, 2), (4, 4), (5, 7), (6, 15)])
def test_weight_bound(num_vars, expected):
    assert weight_bound(num_vars) == expected


def test_verbose_progress(capsys):
    ThresholdIdentifier(backend="sat", verbose=True).identify(TruthTable.named("and2"))
    out = capsys.readouterr().out
    assert "Phase 1" in out
    assert "Linear form: [1, 1, 2]" in out

    ThresholdIdentifier(backend="sat").identify(TruthTable.named("and2"))
    assert capsys.readouterr().out == ""


def test_invalid_configuration():
    with pytest.raises(ValueError):
        ThresholdIdentifier(backend="cplex")
    with pytest.raises(ValueError):
        ThresholdIdentifier(cover="espresso")
    with pytest.raises(ValueError):
        ThresholdIdentifier(max_weight=0)


def test_solver_failure_is_not_a_negative_verdict(monkeypatch):
    monkeypatch.setattr(lp, "pick_pulp_solver", lambda msg=False: None)
    identifier = ThresholdIdentifier(backend="pulp")

    # Binate functions are rejected before any model is built
    assert identifier.identify(TruthTable.named("xor2")).status == BINATE

    with pytest.raises(SolverInternalError):
        identifier.identify(TruthTable.named("and2"))


def test_binate_result_has_no_weights():
    result = ThresholdIdentifier(backend="sat").identify(TruthTable.named("xor2"))
    assert result.weights is None
    assert result.threshold is None
