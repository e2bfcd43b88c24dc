## -*- coding: utf-8 -*-\
"""
    chinooklessons.runner
    ~~~~~~~~~~~~~~~~~~~~~

    Run lessons against a database and check learner answers.

    Everything a lesson or a learner runs happens inside a transaction
    that is rolled back afterwards, unless a commit is asked for, so the
    dataset is never left half modified. Each statement gets its own
    SAVEPOINT, which lets a lesson carry on past a statement that fails
    on purpose.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import collections
import logging
import re

from sqlalchemy.exc import DBAPIError

from chinooklessons.parser import (
    STATEMENT, load_lesson, resolve_requirements, split_script)
from chinooklessons.utils import dummy_gettext, row_key

logger = logging.getLogger(__name__)

_order_by_re = re.compile(r"\border\s+by\b", re.IGNORECASE)
# the runner owns the transaction, these would end it early
_transaction_control_re = re.compile(
    r"^\s*(BEGIN|COMMIT|END|ROLLBACK|SAVEPOINT|RELEASE)\b", re.IGNORECASE)


class QueryResult(object):

    """What the database returned for a single statement."""

    def __init__(self, sql, columns=None, rows=None, rowcount=None,
                 error=None):
        """Initializes a new result.

        :param str sql: The statement that was run.
        :param columns: Column names, ``None`` if the statement returned
            no result set.
        :param rows: List of row tuples, ``None`` if the statement
            returned no result set.
        :param rowcount: Rows affected, as reported by the driver.
        :param error: The database's error message if the statement
            failed.

        """
        self.sql = sql
        self.columns = columns
        self.rows = rows
        self.rowcount = rowcount
        self.error = error

    def __repr__(self):
        if self.error is not None:
            return "<QueryResult error=%r>" % self.error
        if self.rows is None:
            return "<QueryResult rowcount=%s>" % self.rowcount
        return "<QueryResult rows=%s>" % len(self.rows)

    @property
    def failed(self):
        return self.error is not None


class StepResult(object):

    """Outcome of running one example step."""

    def __init__(self, step, result, passed=None, message=""):
        self.step = step
        self.result = result
        self.passed = passed
        self.message = message

    @property
    def checked(self):
        """Whether the step stated a result to check against."""
        return self.passed is not None


class LessonReport(object):

    """Outcome of running a whole lesson."""

    def __init__(self, lesson, results=None, committed=False):
        self.lesson = lesson
        self.results = results or []
        self.committed = committed

    @property
    def failures(self):
        return [result for result in self.results if result.passed is False]

    @property
    def passed(self):
        return not self.failures

    def summary(self):
        """Plain text report, one line per step."""
        lines = ["%s (%s)" % (self.lesson.title, self.lesson.slug)]
        for result in self.results:
            step = result.step
            if result.passed is None:
                status = "----"
                detail = (result.result.error or
                          _describe_result(result.result))
            elif result.passed:
                status = "PASS"
                detail = step.expectation.describe()
            else:
                status = "FAIL"
                detail = result.message
            lines.append("  [%s] step %s (line %s): %s" % (
                status, step.number, step.line, detail))
        checked = len([r for r in self.results if r.checked])
        lines.append("%s of %s checked steps passed." % (
            checked - len(self.failures), checked))
        return "\n".join(lines)


class ChallengeResult(object):

    """Outcome of checking a learner's answer to a challenge."""

    PASSED = "passed"
    FAILED = "failed"
    UNCHECKED = "unchecked"

    def __init__(self, challenge, result, passed=None, message="",
                 solution_result=None):
        self.challenge = challenge
        self.result = result
        self.passed = passed
        self.message = message
        self.solution_result = solution_result

    @property
    def status(self):
        if self.passed is None:
            return self.UNCHECKED
        return self.PASSED if self.passed else self.FAILED


def _describe_result(result):
    if result.rows is None:
        return "%s rows affected" % result.rowcount
    return "%s rows" % len(result.rows)


def _statements(sql):
    return [segment.text for segment in split_script(sql)
            if segment.kind == STATEMENT]


def results_match(actual, expected, ordered):
    """Compare the rows of two query results.

    Column names are ignored, only values are compared.

    :param actual: The learner's :class:`QueryResult`.
    :param expected: The reference solution's :class:`QueryResult`.
    :param bool ordered: Whether row order matters.
    :rtype: bool

    """
    if actual.rows is None or expected.rows is None:
        return (actual.rows is None and expected.rows is None and
                actual.rowcount == expected.rowcount)
    actual_keys = [row_key(row) for row in actual.rows]
    expected_keys = [row_key(row) for row in expected.rows]
    if ordered:
        return actual_keys == expected_keys
    return collections.Counter(actual_keys) == \
        collections.Counter(expected_keys)


class LessonRunner(object):

    """Runs lessons and checks challenge answers on one engine."""

    def __init__(self, engine, gettext=None, loader=None):
        """Initializes a new runner.

        :param engine: Engine for the Chinook database, normally built
            with :func:`~chinooklessons.database.create_lesson_engine`.
        :param gettext: Supply a translation function to convert
            messages to the desired language.
        :type gettext: callable or None
        :param loader: Callable taking a lesson slug and returning a
            lesson, used for required lessons. Defaults to
            :func:`~chinooklessons.parser.load_lesson`.
        :type loader: callable or None

        """
        self.engine = engine
        self.gettext = gettext or dummy_gettext
        self.loader = loader or load_lesson

    def execute(self, conn, sql):
        """Run one statement in a SAVEPOINT on an open transaction.

        A database error rolls back the SAVEPOINT and is returned on
        the result rather than raised.

        :param conn: Connection with a transaction in progress.
        :param str sql: A single SQL statement.
        :rtype: :class:`QueryResult`

        """
        logger.debug("Executing: %s", sql)
        if _transaction_control_re.match(sql):
            return QueryResult(sql, error=self.gettext(
                "Transaction control statements can't be run here."))
        savepoint = conn.begin_nested()
        try:
            cursor = conn.exec_driver_sql(sql)
            if cursor.returns_rows:
                columns = list(cursor.keys())
                rows = [tuple(row) for row in cursor.fetchall()]
            else:
                columns = None
                rows = None
            rowcount = cursor.rowcount
        except DBAPIError as exc:
            savepoint.rollback()
            error = str(exc.orig) if exc.orig is not None else str(exc)
            logger.debug("Statement failed: %s", error)
            return QueryResult(sql, error=error)
        savepoint.commit()
        return QueryResult(
            sql, columns=columns, rows=rows, rowcount=rowcount)

    def run_statement(self, sql):
        """Run SQL on its own and roll back any change it made.

        When ``sql`` holds several statements they all run, and the
        result of the last one is returned.

        :param str sql: One or more SQL statements.
        :rtype: :class:`QueryResult`

        """
        statements = _statements(sql)
        result = QueryResult(sql, rows=None, rowcount=0)
        with self.engine.connect() as conn:
            transaction = conn.begin()
            try:
                for statement in statements:
                    result = self.execute(conn, statement)
            finally:
                transaction.rollback()
        return result

    def _replay(self, conn, lesson):
        """Run a lesson's steps without checking them."""
        logger.debug("Replaying lesson %s", lesson.slug)
        for step in lesson.steps:
            self.execute(conn, step.sql)

    def run_lesson(self, lesson, commit=False, with_requirements=True):
        """Run every step of a lesson and check the stated results.

        :param lesson: The lesson to run.
        :type lesson: :class:`~chinooklessons.lesson.Lesson`
        :param bool commit: Keep the changes the lesson makes. By
            default everything is rolled back.
        :param bool with_requirements: Run the lessons this one
            requires first, in the same transaction.
        :rtype: :class:`LessonReport`

        """
        _ = self.gettext
        report = LessonReport(lesson)
        with self.engine.connect() as conn:
            transaction = conn.begin()
            try:
                if with_requirements:
                    for required in resolve_requirements(
                            lesson, loader=self.loader):
                        self._replay(conn, required)
                for step in lesson.steps:
                    result = self.execute(conn, step.sql)
                    if step.expectation is None:
                        step_result = StepResult(step, result)
                    else:
                        passed, message = step.expectation.evaluate(
                            result, gettext=_)
                        step_result = StepResult(
                            step, result, passed=passed, message=message)
                        if not passed:
                            logger.info(
                                "%s step %s failed: %s",
                                lesson.slug, step.number, message)
                    report.results.append(step_result)
            except Exception:
                transaction.rollback()
                raise
            if commit:
                transaction.commit()
                report.committed = True
            else:
                transaction.rollback()
        return report

    def check_answer(self, lesson, number, sql):
        """Check a learner's answer to a challenge.

        The answer runs against the database as it would be after the
        required lessons, the lesson's own steps and the reference
        solutions of any earlier challenges, and is then rolled back.

        It passes when it meets the challenge's stated expectation and,
        if the challenge has a reference solution, returns the same
        rows as it does. Row order only matters when the solution has
        an ``ORDER BY``. For statements that return no rows, the
        affected row counts are compared instead.

        :param lesson: The lesson the challenge belongs to.
        :param int number: The challenge number.
        :param str sql: The learner's SQL, one or more statements.
        :raises ChallengeNotFound: If the lesson has no such challenge.
        :rtype: :class:`ChallengeResult`

        """
        _ = self.gettext
        challenge = lesson.challenge(number)
        statements = _statements(sql)
        if not statements:
            return ChallengeResult(
                challenge, None, passed=False,
                message=_("No SQL statement was given."))
        if not challenge.checkable:
            logger.info("Challenge %s of %s has nothing to check against",
                        number, lesson.slug)
        with self.engine.connect() as conn:
            transaction = conn.begin()
            try:
                for required in resolve_requirements(
                        lesson, loader=self.loader):
                    self._replay(conn, required)
                self._replay(conn, lesson)
                for earlier in lesson.challenges:
                    if earlier is challenge:
                        break
                    if earlier.solution is not None:
                        self.execute(conn, earlier.solution)
                answer = conn.begin_nested()
                for statement in statements:
                    result = self.execute(conn, statement)
                answer.rollback()
                solution_result = None
                if challenge.solution is not None:
                    solution = conn.begin_nested()
                    solution_result = self.execute(conn, challenge.solution)
                    solution.rollback()
            finally:
                transaction.rollback()
        return self._judge(challenge, result, solution_result)

    def _judge(self, challenge, result, solution_result):
        _ = self.gettext
        checked = ChallengeResult(
            challenge, result, solution_result=solution_result)
        if not challenge.checkable:
            if result.failed:
                checked.passed = False
                checked.message = _("Statement failed: %(error)s",
                                    error=result.error)
            else:
                checked.message = _(
                    "This challenge has no stated answer to check "
                    "against.")
            return checked
        if challenge.expectation is not None:
            passed, message = challenge.expectation.evaluate(
                result, gettext=_)
            if not passed:
                checked.passed = False
                checked.message = message
                return checked
        elif result.failed:
            checked.passed = False
            checked.message = _("Statement failed: %(error)s",
                                error=result.error)
            return checked
        if solution_result is not None and not solution_result.failed \
                and not result.failed:
            ordered = bool(_order_by_re.search(challenge.solution))
            if not results_match(result, solution_result, ordered):
                checked.passed = False
                checked.message = _(
                    "Your results differ from the reference solution.")
                return checked
        checked.passed = True
        return checked
