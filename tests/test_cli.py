"""
    tests.test_cli
    ~~~~~~~~~~~~~~

    Tests for the chinook-lessons command.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import io
import os
import unittest
from unittest import mock

from chinooklessons.cli import main
from tests.fixtures import (
    FIXTURE_CHALLENGES, FIXTURE_LESSON, FixtureDatabaseTestCase)


class CliTests(FixtureDatabaseTestCase):

    """Run the command line interface against the fixture database."""

    def setUp(self):
        super(CliTests, self).setUp()
        self.lesson_path = self.write_file("fixture_lesson.sql",
                                           FIXTURE_LESSON)
        self.challenges_path = self.write_file("challenges.sql",
                                               FIXTURE_CHALLENGES)

    def write_file(self, name, text):
        path = os.path.join(self.tmp_dir, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def call(self, *argv):
        out = io.StringIO()
        with mock.patch("sys.stderr", new_callable=io.StringIO) as err:
            status = main(list(argv), out=out)
        return status, out.getvalue(), err.getvalue()

    def call_db(self, *argv):
        """Run a command against the fixture database."""
        return self.call(*(argv + ("--database", self.db_url)))

    def test_list(self):
        status, output, _ = self.call("list")
        self.assertEqual(status, 0)
        self.assertIn("selecting", output)
        self.assertIn("Combining Results With UNION", output)

    def test_show(self):
        status, output, _ = self.call(
            "show", "selecting", "--challenges", "--solutions")
        self.assertEqual(status, 0)
        self.assertIn("-- Step 1", output)
        self.assertIn("Bronze challenges", output)
        self.assertIn("Solution:", output)

    def test_show_without_challenges(self):
        status, output, _ = self.call("show", self.challenges_path)
        self.assertEqual(status, 0)
        self.assertIn("Fixture Challenges", output)
        self.assertNotIn("Bronze challenges", output)

    def test_run(self):
        status, output, _ = self.call_db("run", self.lesson_path)
        self.assertEqual(status, 0)
        self.assertIn("6 of 6 checked steps passed.", output)
        self.assertNotIn("Changes committed.", output)

    def test_run_commit(self):
        status, output, _ = self.call_db(
            "run", self.lesson_path, "--commit")
        self.assertEqual(status, 0)
        self.assertIn("Changes committed.", output)
        self.assertEqual(self.scalar("select count(*) from Artist"), 4)

    def test_run_failing(self):
        path = self.write_file(
            "failing.sql", "-- Expected : 10 rows\nselect * from Artist;\n")
        status, output, _ = self.call_db("run", path)
        self.assertEqual(status, 1)
        self.assertIn("[FAIL]", output)

    def test_check_passed(self):
        status, output, _ = self.call_db(
            "check", self.challenges_path, "1",
            "--sql", "select Name from MediaType")
        self.assertEqual(status, 0)
        self.assertIn("MPEG audio file", output)
        self.assertIn("PASSED: challenge 1 of challenges", output)

    def test_check_failed(self):
        status, output, _ = self.call_db(
            "check", self.challenges_path, "1",
            "--sql", "select Name from Genre")
        self.assertEqual(status, 1)
        self.assertIn("FAILED: challenge 1 of challenges - Row 1", output)

    def test_check_file(self):
        answer = self.write_file(
            "answer.sql", "select Name from Artist order by Name;\n")
        status, output, _ = self.call_db(
            "check", self.challenges_path, "3",
            "--file", answer, "--preview", "1")
        self.assertEqual(status, 0)
        self.assertIn("... 3 rows", output)

    def test_check_unchecked(self):
        status, output, _ = self.call_db(
            "check", self.challenges_path, "4",
            "--sql", "select * from Artist")
        self.assertEqual(status, 0)
        self.assertIn("UNCHECKED", output)

    def test_verify(self):
        status, output, _ = self.call_db("verify")
        self.assertEqual(status, 1)
        self.assertIn("Artist: expected 275 rows, found 3", output)

    def test_install(self):
        path = os.path.join(self.tmp_dir, "new.sqlite")
        with mock.patch("chinooklessons.cli.install_chinook") as install:
            status, output, _ = self.call("install", "--path", path)
        self.assertEqual(status, 0)
        install.assert_called_once_with(path, url=None, force=False)
        install.return_value.dispose.assert_called_once_with()
        self.assertIn(path, output)

    def test_missing_database(self):
        path = os.path.join(self.tmp_dir, "missing.sqlite")
        for argv in (("verify",), ("run", self.lesson_path),
                     ("check", self.challenges_path, "1", "--sql",
                      "select Name from MediaType")):
            status, _, error = self.call(
                *(argv + ("--database", "sqlite:///" + path)))
            self.assertEqual(status, 2)
            self.assertIn("chinook-lessons install", error)
            self.assertFalse(os.path.exists(path))

    def test_unknown_lesson(self):
        status, output, error = self.call("show", "no_such_lesson")
        self.assertEqual(status, 2)
        self.assertEqual(output, "")
        self.assertIn("no_such_lesson", error)

    def test_unknown_challenge(self):
        status, _, error = self.call_db(
            "check", self.challenges_path, "9", "--sql", "select 1")
        self.assertEqual(status, 2)
        self.assertIn("no challenge 9", error)


if __name__ == '__main__':    # pragma no cover
    unittest.main()
