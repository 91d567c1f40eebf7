import struct

import pytest

from rmdb.defs import (
    ColType,
    CompOp,
    Condition,
    Rid,
    SetClause,
    TabCol,
    Value,
    coltype2str,
)
from rmdb.errors import StringOverflowError


def test_coltype_names():
    assert coltype2str(ColType.TYPE_INT) == "INT"
    assert coltype2str(ColType.TYPE_FLOAT) == "FLOAT"
    assert coltype2str(ColType.TYPE_STRING) == "STRING"


def test_coltype_serialises_as_int():
    assert [int(t) for t in ColType] == [0, 1, 2]
    assert ColType(2) is ColType.TYPE_STRING


def test_rid_equality_and_hash():
    a = Rid(page_no=1, slot_no=2)
    b = Rid(1, 2)
    assert a == b
    assert len({a, b}) == 1
    assert Rid(1, 3) not in {a}


def test_tabcol_ordering():
    cols = [TabCol("b", "a"), TabCol("a", "z"), TabCol("a", "b")]
    assert sorted(cols) == [TabCol("a", "b"), TabCol("a", "z"), TabCol("b", "a")]


def test_int_value_round_trip():
    value = Value()
    value.set_int(-12345)
    value.init_raw(4)
    assert value.type is ColType.TYPE_INT
    assert struct.unpack("<i", value.raw)[0] == -12345


def test_float_value_round_trip():
    value = Value()
    value.set_float(2.5)
    value.init_raw(4)
    assert value.type is ColType.TYPE_FLOAT
    assert struct.unpack("<f", value.raw)[0] == 2.5


def test_string_value_is_zero_padded():
    value = Value()
    value.set_str("ab")
    value.init_raw(5)
    assert value.raw == b"ab" + b"\0" * 3


def test_string_overflow():
    value = Value()
    value.set_str("abcdef")
    with pytest.raises(StringOverflowError):
        value.init_raw(3)


def test_int_with_wrong_length_rejected():
    value = Value()
    value.set_int(1)
    with pytest.raises(ValueError):
        value.init_raw(8)


def test_raw_cannot_be_initialised_twice():
    value = Value()
    value.set_int(1)
    value.init_raw(4)
    with pytest.raises(ValueError):
        value.init_raw(4)


def test_condition_and_set_clause_hold_parts():
    rhs = Value()
    rhs.set_int(3)
    cond = Condition(TabCol("t", "a"), CompOp.OP_GE, True, rhs_val=rhs)
    clause = SetClause(TabCol("t", "a"), rhs)
    assert cond.op is CompOp.OP_GE
    assert cond.rhs_col is None
    assert clause.rhs.int_val == 3