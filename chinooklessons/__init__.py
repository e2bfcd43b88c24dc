"""
    chinooklessons.__init__
    ~~~~~~~~~~~~~~~~~~~~~~~

    SQL lessons and challenges built around the Chinook sample database.

    Lessons are commented SQL scripts. They can be read as they are,
    or parsed and run against a Chinook database so that the results
    stated in their comments, and learners' answers to the challenges,
    are checked automatically.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
from chinooklessons.exceptions import (
    LessonException, LessonSyntaxError, LessonNotFound, ChallengeNotFound,
    DatasetError)
from chinooklessons.lesson import TIERS, Challenge, Expectation, Lesson, Step
from chinooklessons.parser import (
    available_lessons, load_lesson, load_lesson_file, parse_lesson,
    resolve_requirements)
from chinooklessons.runner import (
    ChallengeResult, LessonReport, LessonRunner, QueryResult, StepResult)
from chinooklessons.database import (
    create_lesson_engine, database_url, install_chinook, verify_chinook)


__all__ = ["LessonException", "LessonSyntaxError", "LessonNotFound",
           "ChallengeNotFound", "DatasetError", "TIERS", "Challenge",
           "Expectation", "Lesson", "Step", "available_lessons",
           "load_lesson", "load_lesson_file", "parse_lesson",
           "resolve_requirements", "ChallengeResult", "LessonReport",
           "LessonRunner", "QueryResult", "StepResult",
           "create_lesson_engine", "database_url", "install_chinook",
           "verify_chinook"]
__version__ = "1.0.0"
