"""
    chinooklessons.cli
    ~~~~~~~~~~~~~~~~~~

    Command line interface for reading, running and checking lessons.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import argparse
import logging
import sys

from chinooklessons.database import (
    create_lesson_engine, install_chinook, verify_chinook)
from chinooklessons.exceptions import LessonException
from chinooklessons.lesson import TIERS
from chinooklessons.parser import (
    available_lessons, load_lesson, load_lesson_file)
from chinooklessons.runner import LessonRunner
from chinooklessons.utils import format_value

logger = logging.getLogger(__name__)


def _load(name):
    if name.lower().endswith(".sql"):
        return load_lesson_file(name)
    return load_lesson(name)


def _indent(text, prefix="    "):
    return "\n".join(prefix + line if line else line
                     for line in text.split("\n"))


def cmd_list(args, out):
    for slug in available_lessons():
        lesson = load_lesson(slug)
        out.write("%-12s %-32s %3s steps %3s challenges\n" % (
            slug, lesson.title, len(lesson.steps), len(lesson.challenges)))
    return 0


def cmd_show(args, out):
    lesson = _load(args.lesson)
    out.write("%s\n%s\n" % (lesson.title, "=" * len(lesson.title)))
    if lesson.requires:
        out.write("Requires: %s\n" % ", ".join(lesson.requires))
    for step in lesson.steps:
        out.write("\n-- Step %s\n" % step.number)
        if step.narrative:
            out.write(_indent(step.narrative) + "\n")
        out.write(_indent(step.sql) + ";\n")
    if args.challenges:
        for tier in TIERS:
            challenges = lesson.challenges_for(tier)
            if not challenges:
                continue
            heading = "%s challenges" % tier.title()
            out.write("\n%s\n%s\n" % (heading, "-" * len(heading)))
            for challenge in challenges:
                out.write("\n%s. %s\n" % (
                    challenge.number, _indent(challenge.prompt).lstrip()))
                if args.solutions and challenge.solution:
                    out.write("\n    Solution:\n%s;\n" % _indent(
                        challenge.solution, "        "))
    return 0


def cmd_run(args, out):
    lesson = _load(args.lesson)
    engine = create_lesson_engine(
        args.database, foreign_keys=args.foreign_keys)
    try:
        report = LessonRunner(engine).run_lesson(lesson, commit=args.commit)
    finally:
        engine.dispose()
    out.write(report.summary() + "\n")
    if report.committed:
        out.write("Changes committed.\n")
    return 0 if report.passed else 1


def cmd_check(args, out):
    lesson = _load(args.lesson)
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            sql = f.read()
    else:
        sql = args.sql
    engine = create_lesson_engine(
        args.database, foreign_keys=args.foreign_keys)
    try:
        checked = LessonRunner(engine).check_answer(lesson, args.number, sql)
    finally:
        engine.dispose()
    result = checked.result
    if result is not None and result.rows is not None:
        for row in result.rows[:args.preview]:
            out.write("    " + "\t".join(format_value(v) for v in row) + "\n")
        if len(result.rows) > args.preview:
            out.write("    ... %s rows\n" % len(result.rows))
    out.write("%s: challenge %s of %s" % (
        checked.status.upper(), args.number, lesson.slug))
    out.write(" - %s\n" % checked.message if checked.message else "\n")
    return 1 if checked.passed is False else 0


def cmd_install(args, out):
    engine = install_chinook(args.path, url=args.url, force=args.force)
    engine.dispose()
    out.write("Installed Chinook database at %s\n" % args.path)
    return 0


def cmd_verify(args, out):
    engine = create_lesson_engine(args.database)
    try:
        mismatches = verify_chinook(engine)
    finally:
        engine.dispose()
    for name, (expected, actual) in sorted(mismatches.items()):
        out.write("%s: expected %s rows, found %s\n" % (
            name, expected, actual))
    if mismatches:
        return 1
    out.write("Database matches the reference Chinook dataset.\n")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="chinook-lessons",
        description="SQL lessons and challenges on the Chinook database.")
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log every statement that is run.")
    database = argparse.ArgumentParser(add_help=False)
    database.add_argument(
        "--database", default=None,
        help="SQLAlchemy URL of the Chinook database. Defaults to "
             "$CHINOOK_DATABASE_URL, then ./chinook.sqlite.")
    database.add_argument(
        "--foreign-keys", action="store_true",
        help="Enforce foreign key constraints.")
    commands = parser.add_subparsers(dest="command", required=True)

    sub = commands.add_parser("list", help="List the bundled lessons.")
    sub.set_defaults(func=cmd_list)

    sub = commands.add_parser("show", help="Print a lesson.")
    sub.add_argument("lesson", help="Lesson name or path to a .sql file.")
    sub.add_argument("--challenges", action="store_true",
                     help="Include the challenges.")
    sub.add_argument("--solutions", action="store_true",
                     help="Include reference solutions of challenges.")
    sub.set_defaults(func=cmd_show)

    sub = commands.add_parser(
        "run", parents=[database],
        help="Run a lesson and check its stated results.")
    sub.add_argument("lesson", help="Lesson name or path to a .sql file.")
    sub.add_argument("--commit", action="store_true",
                     help="Keep the changes the lesson makes.")
    sub.set_defaults(func=cmd_run)

    sub = commands.add_parser(
        "check", parents=[database], help="Check a challenge answer.")
    sub.add_argument("lesson", help="Lesson name or path to a .sql file.")
    sub.add_argument("number", type=int, help="Challenge number.")
    answer = sub.add_mutually_exclusive_group(required=True)
    answer.add_argument("--sql", help="The answer.")
    answer.add_argument("--file", help="File holding the answer.")
    sub.add_argument("--preview", type=int, default=10,
                     help="Number of result rows to print.")
    sub.set_defaults(func=cmd_check)

    sub = commands.add_parser(
        "install", help="Download the Chinook database.")
    sub.add_argument("--path", default="chinook.sqlite",
                     help="File to create.")
    sub.add_argument("--url", default=None,
                     help="Location of the Chinook SQLite script.")
    sub.add_argument("--force", action="store_true",
                     help="Replace an existing file.")
    sub.set_defaults(func=cmd_install)

    sub = commands.add_parser(
        "verify", parents=[database],
        help="Check the database holds the reference dataset.")
    sub.set_defaults(func=cmd_verify)
    return parser


def main(argv=None, out=None):
    """Entry point for the ``chinook-lessons`` command.

    :param argv: Arguments, defaults to ``sys.argv[1:]``.
    :param out: Stream to write to, defaults to ``sys.stdout``.
    :return: Exit status.
    :rtype: int

    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s")
    out = out or sys.stdout
    try:
        return args.func(args, out)
    except LessonException as exc:
        logger.debug("Command failed", exc_info=True)
        sys.stderr.write("error: %s\n" % exc)
        return 2
