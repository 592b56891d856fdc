import pytest

from rucdb.record_printer import RecordPrinter


def test_separator_single_column():
    assert RecordPrinter(1).separator() == "+------------------+\n"


def test_separator_two_columns():
    assert RecordPrinter(2).separator() == "+------------------+------------------+\n"


def test_record_right_aligned():
    assert RecordPrinter(1).record(["num"]) == "|              num |\n"
    assert RecordPrinter(2).record(["id", "num"]) == "|               id |              num |\n"


def test_record_count():
    assert RecordPrinter.record_count(2) == "Total record(s): 2\n"
    assert RecordPrinter.record_count(0) == "Total record(s): 0\n"


def test_full_table_matches_expected_layout():
    printer = RecordPrinter(1)
    text = (
        printer.separator()
        + printer.record(["num"])
        + printer.separator()
        + printer.record(["4"])
        + printer.record(["2"])
        + printer.separator()
        + RecordPrinter.record_count(2)
    )
    assert text == (
        "+------------------+\n"
        "|              num |\n"
        "+------------------+\n"
        "|                4 |\n"
        "|                2 |\n"
        "+------------------+\n"
        "Total record(s): 2\n"
    )


def test_long_values_are_truncated_to_width():
    printer = RecordPrinter(1)
    line = printer.record(["x" * 40])
    assert line.endswith("... |\n")
    assert len(line) == len(printer.record(["short"]))
    assert "x" * (RecordPrinter.COL_WIDTH - 3) + "..." in line


def test_value_of_exact_width_is_kept():
    value = "y" * RecordPrinter.COL_WIDTH
    assert value in RecordPrinter(1).record([value])


def test_rows_line_up_with_separator():
    printer = RecordPrinter(3)
    assert len(printer.record(["a", "bb", "ccc"])) == len(printer.separator())


def test_wrong_value_count_rejected():
    with pytest.raises(ValueError):
        RecordPrinter(2).record(["only one"])


@pytest.mark.parametrize("num_cols", [0, -1])
def test_non_positive_columns_rejected(num_cols):
    with pytest.raises(ValueError):
        RecordPrinter(num_cols)