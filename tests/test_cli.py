import pytest

from threshold_logic.cli import EXIT_ERROR, EXIT_NOT_THRESHOLD, EXIT_THRESHOLD, main, parse_table
from threshold_logic.truth_tables import TruthTable


def test_parse_table():
    assert parse_table("maj3") == TruthTable.named("maj3")
    assert parse_table("e8", use_hex=True) == TruthTable.named("maj3")
    assert parse_table("1000", num_vars=2) == TruthTable.named("and2")


def test_threshold_function(capsys):
    assert main(["1000", "--backend", "sat"]) == EXIT_THRESHOLD
    out = capsys.readouterr().out
    assert "Linear form: [1, 1, 2]" in out


def test_not_threshold_function(capsys):
    assert main(["0110", "--backend", "sat"]) == EXIT_NOT_THRESHOLD
    assert "x0 is binate" in capsys.readouterr().out


def test_help_mentions_sat_backend_size_limit(capsys):
    with pytest.raises(SystemExit):
        main(["--help"])
    help_text = " ".join(capsys.readouterr().out.split())
    assert "sat only suits up to about 6 variables" in help_text


def test_equations_format(capsys):
    assert main(["--hex", "e8", "-b", "sat", "-f", "equations"]) == EXIT_THRESHOLD
    assert capsys.readouterr().out.strip() == "f = [x0 + x1 + x2 >= 2]"


def test_verilog_format_is_quiet(capsys):
    assert main(["and2", "-b", "sat", "-f", "verilog", "-v"]) == EXIT_THRESHOLD
    out = capsys.readouterr().out
    assert out.startswith("// Threshold logic gate")
    assert "Phase 1" not in out


def test_verbose_and_verify(capsys):
    assert main(["0100", "-b", "sat", "-v", "--verify"]) == EXIT_THRESHOLD
    out = capsys.readouterr().out
    assert "Phase 1: Unateness check" in out
    assert "All correct: True" in out


def test_truth_table_option(capsys):
    assert main(["1000", "--truth-table"]) == EXIT_THRESHOLD
    assert "Truth Table (2 variables)" in capsys.readouterr().out


def test_invalid_table(capsys):
    assert main(["101"]) == EXIT_ERROR
    assert "Error:" in capsys.readouterr().err


def test_variable_count_mismatch(capsys):
    assert main(["1000", "-n", "3"]) == EXIT_ERROR
    assert "expected 3" in capsys.readouterr().err


def test_census_option(capsys):
    assert main(["--census", "2", "-b", "sat"]) == EXIT_THRESHOLD
    assert "Threshold:          14" in capsys.readouterr().out
