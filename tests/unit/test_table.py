"""Unit tests for the property table."""

import logging

import pytest

from ipprops import (
    AddressParseError,
    ColumnParseError,
    FlagGroupProperty,
    FlagProperty,
    RangeParseError,
    SchemaError,
    StringProperty,
    Table,
    TableConfig,
    TagProperty,
    VocabularyOverflowError,
)


@pytest.fixture
def table():
    """Create a table with one column of each kind."""
    t = Table()
    t.add_column(TagProperty("owner"))
    t.add_column(FlagProperty("active"))
    t.add_column(FlagGroupProperty("flags", ["prod", "dmz", "internal"]))
    t.add_column(StringProperty("Description"))
    return t


def test_add_column_assigns_offsets_and_indices(table):
    """Test offsets are the running sum of sizes."""
    sizes = [col.size for col in table.columns]

    assert table.row_size == sum(sizes)
    for i, col in enumerate(table.columns):
        assert col.index == i
        assert col.offset == sum(sizes[:i])


def test_add_column_is_chainable():
    """Test chained schema construction."""
    a, b = TagProperty("a"), TagProperty("b")
    t = Table().add_column(a).add_column(b)

    assert t.column(1) is b
    assert t.row_size == 2


def test_add_column_after_parse_rejected(table):
    """Test that the schema is frozen once parsing starts."""
    table.parse("")

    with pytest.raises(SchemaError):
        table.add_column(TagProperty("late"))


def test_same_property_cannot_join_twice(table):
    """Test that a bound property is not reusable."""
    with pytest.raises(SchemaError):
        table.add_column(table.column(0))


def test_parse_and_find(table):
    """Test a simple load and lookups."""
    assert table.parse('10.0.0.0/8,acme,yes,prod;dmz,"Main, net"\n')

    row = table.find("10.20.30.40")
    assert row is not None
    assert table.column(0).value(row) == "acme"
    assert table.column(1).value(row) is True
    assert table.column(2).flags(row) == ["prod", "dmz"]
    assert table.column(3).value(row) == "Main, net"
    assert table.find("11.0.0.1") is None
    assert table.diagnostics == []


def test_trailing_newline_adds_no_row(table):
    """Test that input ending in a newline yields no extra line."""
    table.parse("10.0.0.0/8,a,1,-,x\n192.168.0.0/16,b,0,-,y\n")

    assert table.size() == 2
    assert table.diagnostics == []


def test_bad_range_skips_line(table, caplog):
    """Test that an invalid range is reported and skipped."""
    with caplog.at_level(logging.WARNING):
        assert table.parse("bogus,a,1,-,x\n10.0.0.0/8,b,1,-,y")

    assert len(table) == 1
    assert len(table.diagnostics) == 1
    err = table.diagnostics[0]
    assert isinstance(err, RangeParseError)
    assert err.line_no == 1
    assert "not a valid range" in caplog.text


def test_empty_range_skips_line(table):
    """Test that a line with an empty range field is skipped."""
    table.parse(",a,1,-,x")

    assert len(table) == 0
    assert isinstance(table.diagnostics[0], RangeParseError)


def test_bad_column_keeps_row(table):
    """Test that a column error is reported and the row is still stored."""
    table.parse("10.0.0.0/8,acme,maybe,prod;bogus,desc")

    row = table.find("10.0.0.1")
    assert row is not None
    assert table.column(0).value(row) == "acme"
    assert table.column(1).value(row) is False
    assert table.column(2).flags(row) == ["prod"]
    assert table.column(3).value(row) == "desc"

    errors = table.diagnostics
    assert [type(e) for e in errors] == [ColumnParseError, ColumnParseError]
    assert [(e.column, e.line_no, e.token) for e in errors] == [
        (1, 1, "maybe"),
        (2, 1, "prod;bogus"),
    ]


def test_missing_trailing_columns_are_empty(table):
    """Test that absent fields parse as empty tokens."""
    table.parse("10.0.0.0/8,acme")

    row = table.find("10.0.0.1")
    assert table.column(2).flags(row) == []
    assert table.column(3).value(row) == ""
    # Only the flag column rejects an empty token.
    assert [e.column for e in table.diagnostics] == [1]


def test_extra_fields_are_ignored(table):
    """Test that fields beyond the schema are ignored."""
    table.parse("10.0.0.0/8,acme,1,-,desc,extra,more")

    assert table.column(3).value(table.find("10.0.0.1")) == "desc"
    assert table.diagnostics == []


def test_overlapping_ranges_last_wins(table):
    """Test that a later line shadows an earlier one for shared addresses."""
    table.parse("10.0.0.0/8,wide,1,-,outer\n10.1.0.0/16,narrow,1,-,inner\n")

    owner = table.column(0)
    assert owner.value(table.find("10.1.2.3")) == "narrow"
    assert owner.value(table.find("10.2.0.1")) == "wide"
    assert table.size() == 3


def test_tag_overflow_is_reported(caplog):
    """Test that tag overflow becomes a column diagnostic."""
    tag = TagProperty("many")
    t = Table().add_column(tag)
    lines = [f"10.0.{i // 256}.{i % 256},v{i}" for i in range(257)]

    with caplog.at_level(logging.WARNING):
        assert t.parse("\n".join(lines))

    assert len(t) == 257
    assert len(t.diagnostics) == 1
    err = t.diagnostics[0]
    assert isinstance(err, VocabularyOverflowError)
    assert (err.column, err.line_no, err.token) == (0, 257, "v256")


def test_flag_group_separators_in_data(table):
    """Test that stray flag separators neither fail nor drop flags."""
    table.parse("10.0.0.0/8,a,1,prod;;dmz,x\n11.0.0.0/8,b,1,prod;internal;,y\n")

    flags = table.column(2)
    assert flags.flags(table.find("10.0.0.1")) == ["prod", "dmz"]
    assert flags.flags(table.find("11.0.0.1")) == ["prod", "internal"]
    assert table.diagnostics == []


def test_tag_overflow_row_reads_first_tag():
    """Test that an overflowed row is indistinguishable from the first tag."""
    tag = TagProperty("many")
    t = Table().add_column(tag)
    t.parse("\n".join(f"10.0.{i // 256}.{i % 256},v{i}" for i in range(257)))

    assert tag.value(t.find("10.0.1.0")) == "v0"
    assert isinstance(t.diagnostics[0], VocabularyOverflowError)


def test_find_rejects_bad_address(table):
    """Test that an unparseable query address raises."""
    with pytest.raises(AddressParseError):
        table.find("not an address")


def test_custom_delimiter():
    """Test a non-comma delimiter."""
    t = Table(TableConfig(delimiter="|"))
    t.add_column(TagProperty("owner")).add_column(StringProperty("note"))
    t.parse("10.0.0.0/8|acme|'a|b'|ignored\n")

    row = t.find("10.0.0.1")
    assert t.column(0).value(row) == "acme"
    assert t.column(1).value(row) == "'a"


def test_ipv6_rows(table):
    """Test IPv6 ranges alongside IPv4."""
    table.parse("2001:db8::/32,v6net,1,dmz,six\n10.0.0.0/8,v4net,1,-,four")

    assert table.column(0).value(table.find("2001:db8::42")) == "v6net"
    assert table.column(0).value(table.find("10.0.0.42")) == "v4net"
    assert [str(r) for r, _ in table.items()] == ["10.0.0.0/8", "2001:db8::/32"]


def test_crlf_input(table):
    """Test that carriage returns do not leak into values."""
    table.parse("10.0.0.0/8,acme,1,prod,desc\r\n")

    row = table.find("10.0.0.1")
    assert table.column(2).flags(row) == ["prod"]
    assert table.column(3).value(row) == "desc"


def test_load_missing_file(table, tmp_path):
    """Test that an unreadable source fails the load."""
    assert table.load(tmp_path / "missing.csv") is False


def test_load_file(table, tmp_path):
    """Test loading rows from a file."""
    path = tmp_path / "props.csv"
    path.write_text("10.0.0.0/8,acme,1,-,from file\n", encoding="utf-8")

    assert table.load(path)
    assert table.column(3).value(table.find("10.0.0.1")) == "from file"


def test_config_validation():
    """Test that invalid configuration is rejected."""
    with pytest.raises(ValueError):
        TableConfig(delimiter=",,")
    with pytest.raises(ValueError):
        TableConfig(delimiter='"')
    with pytest.raises(ValueError):
        TableConfig(arena_block_size=0)
