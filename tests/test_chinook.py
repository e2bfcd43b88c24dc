"""
    tests.test_chinook
    ~~~~~~~~~~~~~~~~~~

    Runs the bundled lessons against a real Chinook database.

    Set ``CHINOOK_DB`` to the path of a Chinook SQLite file, such as one
    made by ``chinook-lessons install``, to enable these tests.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import os
import unittest

from chinooklessons import (
    LessonRunner, available_lessons, create_lesson_engine, load_lesson,
    verify_chinook)
from chinooklessons.database import sqlite_url

CHINOOK_DB = os.environ.get("CHINOOK_DB")


@unittest.skipUnless(CHINOOK_DB, "CHINOOK_DB is not set.")
class ChinookTests(unittest.TestCase):

    """Bundled lessons against the reference dataset."""

    @classmethod
    def setUpClass(cls):
        cls.db_engine = create_lesson_engine(sqlite_url(CHINOOK_DB))

    @classmethod
    def tearDownClass(cls):
        cls.db_engine.dispose()

    def setUp(self):
        self.runner = LessonRunner(self.db_engine)

    def test_reference_dataset(self):
        self.assertEqual(verify_chinook(self.db_engine), {})

    def test_lessons_pass(self):
        """Every stated result in every lesson holds."""
        for slug in available_lessons():
            with self.subTest(lesson=slug):
                report = self.runner.run_lesson(load_lesson(slug))
                self.assertTrue(report.passed, report.summary())

    def test_solutions_pass(self):
        """Reference solutions pass their own challenges."""
        for slug in available_lessons():
            lesson = load_lesson(slug)
            for challenge in lesson.challenges:
                if challenge.solution is None:
                    continue
                with self.subTest(lesson=slug, challenge=challenge.number):
                    checked = self.runner.check_answer(
                        lesson, challenge.number, challenge.solution)
                    self.assertTrue(checked.passed, checked.message)

    def test_wrong_answer(self):
        lesson = load_lesson("aggregating")
        checked = self.runner.check_answer(
            lesson, 3,
            "select count(*) from Customer where SupportRepId = 3")
        self.assertFalse(checked.passed)

    def test_lessons_leave_no_trace(self):
        self.runner.run_lesson(load_lesson("deleting"))
        self.assertEqual(verify_chinook(self.db_engine), {})


if __name__ == '__main__':    # pragma no cover
    unittest.main()
