## -*- coding: utf-8 -*-\
"""
    chinooklessons.utils
    ~~~~~~~~~~~~~~~~~~~~

    Utility functions for comparing query results with the expected
    values written in lesson comments.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import datetime
import decimal
import math
import re

_cell_separator_re = re.compile(r"\t+| {2,}")
_null_texts = ("NULL", "NONE")


def dummy_gettext(string, **variables):
    """Simple gettext stand in for when none is provided.

    :param string: Input text with optional variable placeholders.
    :param variables: Key word args used to populate any placeholder
        variables in the provided string.

    """
    return string % variables if variables else string


def split_table_line(line):
    """Split a row of an expected result table into cells.

    Cells are separated by tabs or by runs of two or more spaces, so
    single spaces inside a value (``"Helena Holý"``) are preserved.

    :param str line: A single line of an expected table.
    :return: List of stripped cell strings.
    :rtype: list

    """
    return [cell.strip() for cell in _cell_separator_re.split(line.strip())
            if cell.strip()]


def format_value(value):
    """Render a database value the way lesson comments write it.

    :param value: Any value returned by the database driver.
    :rtype: str

    """
    if value is None:
        return "NULL"
    elif isinstance(value, datetime.datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    elif isinstance(value, datetime.date):
        return value.isoformat()
    elif isinstance(value, bytes):
        return value.decode("utf-8", "replace")
    return str(value)


def _to_number(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, decimal.Decimal)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return None


def values_match(actual, expected):
    """Check a single database value against its expected text.

    Numbers are compared numerically, so a computed
    ``3.9600000000000004`` matches an expected ``3.96``. Everything
    else is compared by its rendered text.

    :param actual: Value returned by the database.
    :param str expected: Value as written in the lesson.
    :rtype: bool

    """
    expected = str(expected).strip()
    if expected.upper() in _null_texts:
        return actual is None
    if actual is None:
        return False
    if not isinstance(actual, str):
        actual_number = _to_number(actual)
        expected_number = _to_number(expected)
        if actual_number is not None and expected_number is not None:
            return math.isclose(
                actual_number, expected_number,
                rel_tol=1e-9, abs_tol=1e-9)
    return format_value(actual).strip() == expected


def row_matches(actual_row, expected_cells):
    """Check a result row against a list of expected cell strings.

    :param actual_row: Sequence of values from the database.
    :param list expected_cells: Cell strings from the lesson.
    :rtype: bool

    """
    if len(actual_row) != len(expected_cells):
        return False
    for actual, expected in zip(actual_row, expected_cells):
        if not values_match(actual, expected):
            return False
    return True


def row_key(row):
    """Hashable, order insensitive comparison key for a result row.

    Floats are rounded so results computed in a different order still
    compare equal.

    """
    key = []
    for value in row:
        number = None if isinstance(value, str) else _to_number(value)
        if number is not None:
            key.append(("n", round(number, 6)))
        else:
            key.append(("s", format_value(value)))
    return tuple(key)
