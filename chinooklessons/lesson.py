## -*- coding: utf-8 -*-\
"""
    chinooklessons.lesson
    ~~~~~~~~~~~~~~~~~~~~~

    The parsed form of a lesson: example steps, their stated expected
    results, and the tiered challenges that follow them.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
from chinooklessons.exceptions import ChallengeNotFound
from chinooklessons.utils import (
    dummy_gettext, format_value, row_matches, split_table_line,
    values_match)

#: Challenge tiers, easiest first.
TIERS = ("bronze", "silver", "gold", "experiment")


class Expectation(object):

    """A result stated in a lesson comment."""

    ROWS = "rows"
    AFFECTED = "affected"
    SCALAR = "scalar"
    ERROR = "error"
    TABLE = "table"

    EXACT = "exact"
    PREFIX = "prefix"
    SAMPLE = "sample"

    def __init__(self, kind, count=None, value=None, rows=None, mode=None,
                 error=None):
        """Initializes a new expectation.

        :param str kind: One of :attr:`ROWS`, :attr:`AFFECTED`,
            :attr:`SCALAR`, :attr:`ERROR` or :attr:`TABLE`.
        :param count: Number of result rows, or of affected rows for
            :attr:`AFFECTED`. Optional for :attr:`TABLE`.
        :type count: int or None
        :param value: Expected text of a scalar result.
        :type value: str or None
        :param rows: Expected table, as lists of cell strings.
        :type rows: list or None
        :param mode: How ``rows`` are compared. :attr:`EXACT` requires
            every row in order, :attr:`PREFIX` only the first rows in
            order, and :attr:`SAMPLE` requires each listed row to
            appear somewhere in the results.
        :type mode: str or None
        :param error: Text the database error message must contain.
        :type error: str or None

        """
        self.kind = kind
        self.count = count
        self.value = value
        self.rows = rows or []
        self.mode = mode or self.EXACT
        self.error = error

    def __repr__(self):
        return "<Expectation %s>" % self.describe()

    def __eq__(self, other):
        if not isinstance(other, Expectation):
            return NotImplemented
        return (self.kind, self.count, self.value, self.rows, self.mode,
                self.error) == (other.kind, other.count, other.value,
                                other.rows, other.mode, other.error)

    def describe(self):
        """Short human readable form, as a lesson would state it."""
        if self.kind == self.ROWS:
            return "%s row%s" % (self.count, "" if self.count == 1 else "s")
        elif self.kind == self.AFFECTED:
            return "%s row%s affected" % (
                self.count, "" if self.count == 1 else "s")
        elif self.kind == self.SCALAR:
            return self.value
        elif self.kind == self.ERROR:
            return "error: %s" % self.error
        text = "%s rows (%s)" % (
            self.count if self.count is not None else len(self.rows),
            self.mode)
        return text

    def evaluate(self, result, gettext=None):
        """Check a query result against this expectation.

        :param result: The result of running a statement.
        :type result: :class:`~chinooklessons.runner.QueryResult`
        :param gettext: Supply a translation function to convert
            messages to the desired language.
        :type gettext: callable or None
        :return: A ``(passed, message)`` tuple. ``message`` explains a
            failure and is empty on success.
        :rtype: tuple

        """
        _ = gettext or dummy_gettext
        if result.error is not None:
            if (self.kind == self.ERROR and
                    self.error.lower() in result.error.lower()):
                return True, ""
            return False, _("Statement failed: %(error)s",
                            error=result.error)
        if self.kind == self.ERROR:
            return False, _(
                "Expected an error containing '%(error)s' but the "
                "statement succeeded.", error=self.error)
        if self.kind == self.AFFECTED:
            if result.rowcount != self.count:
                return False, _(
                    "Expected %(expected)s affected rows, got %(actual)s.",
                    expected=self.count, actual=result.rowcount)
            return True, ""
        if result.rows is None:
            return False, _("Statement returned no result set.")
        if self.kind == self.ROWS:
            if len(result.rows) != self.count:
                return False, _(
                    "Expected %(expected)s rows, got %(actual)s.",
                    expected=self.count, actual=len(result.rows))
            return True, ""
        if self.kind == self.SCALAR:
            if not result.rows or not result.rows[0]:
                return False, _("Expected %(expected)s, got no rows.",
                                expected=self.value)
            actual = result.rows[0][0]
            if not values_match(actual, self.value):
                return False, _(
                    "Expected %(expected)s, got %(actual)s.",
                    expected=self.value, actual=format_value(actual))
            return True, ""
        return self._evaluate_table(result.rows, _)

    def _evaluate_table(self, rows, _):
        if self.count is not None and len(rows) != self.count:
            return False, _(
                "Expected %(expected)s rows, got %(actual)s.",
                expected=self.count, actual=len(rows))
        if self.mode == self.SAMPLE:
            for expected in self.rows:
                if not any(row_matches(row, expected) for row in rows):
                    return False, _(
                        "Expected row not found: %(row)s",
                        row=" | ".join(expected))
            return True, ""
        if self.mode == self.EXACT and len(rows) != len(self.rows):
            return False, _(
                "Expected %(expected)s rows, got %(actual)s.",
                expected=len(self.rows), actual=len(rows))
        if len(rows) < len(self.rows):
            return False, _(
                "Expected at least %(expected)s rows, got %(actual)s.",
                expected=len(self.rows), actual=len(rows))
        for index, expected in enumerate(self.rows):
            if not row_matches(rows[index], expected):
                return False, _(
                    "Row %(number)s differs. Expected %(expected)s, got "
                    "%(actual)s.",
                    number=index + 1,
                    expected=" | ".join(expected),
                    actual=" | ".join(
                        format_value(value) for value in rows[index]))
        return True, ""

    @classmethod
    def from_table_lines(cls, lines, count=None, mode=None):
        """Build a table expectation from raw expected table lines."""
        rows = [split_table_line(line) for line in lines if line.strip()]
        return cls(cls.TABLE, count=count, rows=rows, mode=mode)


class Step(object):

    """One example statement of a lesson."""

    def __init__(self, number, narrative, sql, expectation=None, line=None):
        self.number = number
        self.narrative = narrative
        self.sql = sql
        self.expectation = expectation
        self.line = line

    def __repr__(self):
        return "<Step %s line=%s>" % (self.number, self.line)


class Challenge(object):

    """An exercise prompt, optionally with a reference solution."""

    def __init__(self, tier, number, prompt, expectation=None,
                 solution=None, line=None):
        self.tier = tier
        self.number = number
        self.prompt = prompt
        self.expectation = expectation
        self.solution = solution
        self.line = line

    def __repr__(self):
        return "<Challenge %s %s>" % (self.tier, self.number)

    @property
    def checkable(self):
        """Whether an answer to this challenge can be verified."""
        return self.expectation is not None or self.solution is not None


class Lesson(object):

    """A parsed lesson script."""

    def __init__(self, slug, title, requires=None, steps=None,
                 challenges=None, source=None):
        self.slug = slug
        self.title = title
        self.requires = requires or []
        self.steps = steps or []
        self.challenges = challenges or []
        self.source = source

    def __repr__(self):
        return "<Lesson %s>" % self.slug

    def challenge(self, number):
        """Get a challenge by its number.

        :param int number: The number shown next to the challenge.
        :raises ChallengeNotFound: If no such challenge exists.
        :rtype: :class:`Challenge`

        """
        for challenge in self.challenges:
            if challenge.number == number:
                return challenge
        raise ChallengeNotFound(self.slug, number)

    def challenges_for(self, tier):
        """All challenges of the given tier, in lesson order."""
        return [challenge for challenge in self.challenges
                if challenge.tier == tier]

    @property
    def statements(self):
        """SQL of every example step, in order."""
        return [step.sql for step in self.steps]
