import pytest

from threshold_logic.truth_tables import (
    TruthTable,
    bits_to_minterm,
    minterm_to_bits,
    print_truth_table,
)


def test_from_binary_is_msb_first():
    tt = TruthTable.from_binary("1000")
    assert tt.num_vars() == 2
    assert tt.bits == 0b1000
    assert tt.evaluate(1, 1) == 1
    assert tt.evaluate(1, 0) == 0
    assert tt == TruthTable.named("and2")


def test_from_hex_infers_variable_count():
    tt = TruthTable.from_hex("e8")
    assert tt.num_vars() == 3
    assert tt == TruthTable.named("maj3")
    assert tt.to_hex() == "e8"
    assert TruthTable.from_hex("0x1", num_vars=1).bits == 1


def test_from_minterms_and_function_agree():
    by_minterms = TruthTable.from_minterms(3, [3, 5, 6, 7])
    by_function = TruthTable.from_function(3, lambda a, b, c: a + b + c >= 2)
    assert by_minterms == by_function == TruthTable.named("maj3")
    assert by_minterms.minterms() == [3, 5, 6, 7]
    assert by_minterms.count_ones() == 4


def test_constant_and_projection():
    assert TruthTable.const(2, 0).is_const0()
    assert TruthTable.const(2, 1).is_const1()
    assert TruthTable.const(0, 1).bits == 1
    assert TruthTable.nth_var(3, 1) == TruthTable.from_function(3, lambda a, b, c: b)


def test_cofactors_keep_variable_count():
    maj = TruthTable.named("maj3")
    # f|x0=1 = x1 OR x2, f|x0=0 = x1 AND x2
    assert maj.cofactor1(0).bits == 0xfc
    assert maj.cofactor0(0).bits == 0xc0
    assert maj.cofactor1(0).num_vars() == 3
    assert not maj.cofactor1(0).has_var(0)


def test_has_var():
    tt = TruthTable.from_function(3, lambda a, b, c: a and c)
    assert tt.has_var(0)
    assert not tt.has_var(1)
    assert tt.has_var(2)


def test_complement():
    assert ~TruthTable.named("and2") == TruthTable.named("nand2")
    assert ~TruthTable.const(0, 0) == TruthTable.const(0, 1)


def test_flip_inplace():
    tt = TruthTable.named("andn2")
    tt.flip_inplace(0)
    assert tt == TruthTable.named("and2")
    tt.flip_inplace(0)
    assert tt == TruthTable.named("andn2")


def test_flip_every_variable_of_larger_table():
    f = TruthTable.from_function(4, lambda a, b, c, d: (a and not b) or (c and d))
    for var in range(4):
        flipped = f.flip(var)
        for m in range(16):
            assert flipped.get_bit(m) == f.get_bit(m ^ (1 << var))


def test_copy_is_independent():
    tt = TruthTable.named("and2")
    work = tt.copy()
    work.flip_inplace(1)
    assert tt == TruthTable.named("and2")


@pytest.mark.parametrize("text", ["", "101", "10a0"])
def test_invalid_binary(text):
    with pytest.raises(ValueError):
        TruthTable.from_binary(text)


def test_invalid_arguments():
    with pytest.raises(ValueError):
        TruthTable(-1)
    with pytest.raises(ValueError):
        TruthTable.from_hex("zz")
    with pytest.raises(ValueError):
        TruthTable.from_hex("ff", num_vars=2)
    with pytest.raises(ValueError):
        TruthTable.named("and2").cofactor0(2)
    with pytest.raises(ValueError):
        TruthTable.from_minterms(2, [4])
    with pytest.raises(ValueError):
        TruthTable.named("and2") & TruthTable.named("maj3")


def test_minterm_conversion():
    assert minterm_to_bits(6, 3) == (0, 1, 1)
    assert bits_to_minterm((0, 1, 1)) == 6


def test_print_truth_table(capsys):
    print_truth_table(TruthTable.named("and2"))
    out = capsys.readouterr().out
    assert "Truth Table (2 variables)" in out
    assert out.strip().endswith("1")
