import pytest

from rmdb.defs import ColType
from rmdb.errors import ColumnNotFoundError, IndexNotFoundError, TableNotFoundError
from rmdb.sm_meta import ColMeta, DbMeta, IndexMeta, TabMeta


def _table(name="t"):
    a = ColMeta(name, "a", ColType.TYPE_INT, 4, 0, True)
    b = ColMeta(name, "b", ColType.TYPE_FLOAT, 4, 4, False)
    c = ColMeta(name, "c", ColType.TYPE_STRING, 16, 8, False)
    idx = IndexMeta(tab_name=name, col_tot_len=8, col_num=2, cols=[a, b])
    return TabMeta(name=name, cols=[a, b, c], indexes=[idx])


def test_col_meta_text():
    col = ColMeta("t", "a", ColType.TYPE_STRING, 16, 8, True)
    assert str(col) == "t a 2 16 8 1"


def test_empty_db_dumps():
    assert DbMeta(name="db").dumps() == "db\n0\n"


def test_round_trip():
    db = DbMeta(name="shop")
    db.set_tab_meta("t", _table("t"))
    db.set_tab_meta("a_tab", _table("a_tab"))
    loaded = DbMeta.loads(db.dumps())
    assert loaded == db
    assert loaded.get_table("t").indexes[0].cols[1].name == "b"


def test_dumps_orders_tables_by_name():
    db = DbMeta(name="d")
    db.set_tab_meta("zeta", TabMeta(name="zeta"))
    db.set_tab_meta("alpha", TabMeta(name="alpha"))
    text = db.dumps()
    assert text.index("alpha") < text.index("zeta")
    assert [t.name for t in db.sorted_tables()] == ["alpha", "zeta"]


def test_is_col_and_get_col():
    tab = _table()
    assert tab.is_col("a")
    assert not tab.is_col("zz")
    assert tab.get_col("c").offset == 8
    with pytest.raises(ColumnNotFoundError):
        tab.get_col("zz")


def test_is_index_requires_exact_column_order():
    tab = _table()
    assert tab.is_index(["a", "b"])
    assert not tab.is_index(["b", "a"])
    assert not tab.is_index(["a"])


def test_get_index_meta():
    tab = _table()
    assert tab.get_index_meta(["a", "b"]).col_tot_len == 8
    with pytest.raises(IndexNotFoundError) as info:
        tab.get_index_meta(["a", "c"])
    assert str(info.value) == "Error: Index not found: t.(a, c)"


def test_get_table_missing():
    db = DbMeta(name="d")
    assert not db.is_table("x")
    with pytest.raises(TableNotFoundError):
        db.get_table("x")


def test_loads_truncated_text():
    with pytest.raises(ValueError):
        DbMeta.loads("db\n1\nt\n")