import pytest

from rmdb.defs import BUFFER_LENGTH
from rmdb.record_printer import RECORD_COUNT_LENGTH, Context, RecordPrinter


def test_new_context_is_empty():
    ctx = Context()
    assert ctx.offset == 0
    assert ctx.output() == ""
    assert ctx.ellipsis is False


def test_separator_shape():
    ctx = Context()
    RecordPrinter(2).print_separator(ctx)
    out = ctx.output()
    assert out.endswith("+\n")
    parts = out[:-1].split("+")
    assert parts[0] == "" and parts[-1] == ""
    segments = parts[1:-1]
    assert len(segments) == 2
    for seg in segments:
        assert set(seg) == {"-"}
        assert len(seg) == RecordPrinter.COL_WIDTH + 2


def test_record_cells_are_right_aligned():
    ctx = Context()
    RecordPrinter(2).print_record(["a", "bb"], ctx)
    out = ctx.output()
    assert out.endswith("|\n")
    cells = out[:-1].split("|")[1:-1]
    assert [c.strip() for c in cells] == ["a", "bb"]
    for cell in cells:
        assert len(cell) == RecordPrinter.COL_WIDTH + 2
    assert cells[0].endswith("a ")
    assert cells[1].endswith("bb ")


def test_long_value_is_truncated():
    ctx = Context()
    RecordPrinter(1).print_record(["abcdefghijklmnopqrstuvwxyz"], ctx)
    out = ctx.output()
    assert "abcdefghijklm..." in out
    assert "n" not in out


def test_value_of_exact_width_is_kept():
    value = "x" * RecordPrinter.COL_WIDTH
    ctx = Context()
    RecordPrinter(1).print_record([value], ctx)
    assert value in ctx.output()


def test_record_count():
    ctx = Context()
    RecordPrinter.print_record_count(7, ctx)
    assert ctx.output() == "Total record(s): 7\n"


def test_ellipsis_when_buffer_fills():
    ctx = Context()
    printer = RecordPrinter(3)
    rows = 0
    while not ctx.ellipsis:
        printer.print_record(["one", "two", "three"], ctx)
        rows += 1
        assert rows < 10_000
    assert ctx.offset + RECORD_COUNT_LENGTH < BUFFER_LENGTH
    before = ctx.offset
    printer.print_record(["more", "rows", "ignored"], ctx)
    assert ctx.offset == before
    RecordPrinter.print_record_count(rows, ctx)
    assert ctx.output().endswith(f"... ...\nTotal record(s): {rows}\n")
    assert ctx.offset <= BUFFER_LENGTH


def test_wrong_number_of_columns():
    with pytest.raises(ValueError):
        RecordPrinter(2).print_record(["only one"], Context())


def test_zero_columns_rejected():
    with pytest.raises(ValueError):
        RecordPrinter(0)


def test_table_layout_lines_have_equal_width():
    ctx = Context()
    printer = RecordPrinter(3)
    printer.print_separator(ctx)
    printer.print_record(["Field", "Type", "Index"], ctx)
    printer.print_separator(ctx)
    printer.print_record(["id", "INT", "NO"], ctx)
    printer.print_separator(ctx)
    lines = ctx.output().splitlines()
    assert len(lines) == 5
    assert len({len(line) for line in lines}) == 1
    assert lines[0] == lines[2] == lines[4]