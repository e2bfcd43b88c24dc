## -*- coding: utf-8 -*-\
"""
    chinooklessons.parser
    ~~~~~~~~~~~~~~~~~~~~~

    Turn commented SQL lesson scripts into :class:`Lesson` objects.

    A script is split into comment and statement segments. Comments
    gathered since the previous statement become the narrative of the
    next one, and any ``Expected : ...`` line in that narrative becomes
    the step's :class:`~chinooklessons.lesson.Expectation`. Once a
    ``BRONZE CHALLENGES`` style heading is seen, each comment block is
    read as a challenge prompt and any statement following it as that
    challenge's reference solution.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import collections
import logging
import os
import re
import textwrap
from importlib import resources

from chinooklessons.exceptions import LessonNotFound, LessonSyntaxError
from chinooklessons.lesson import Challenge, Expectation, Lesson, Step

logger = logging.getLogger(__name__)

Segment = collections.namedtuple("Segment", ["kind", "text", "line"])
COMMENT = "comment"
STATEMENT = "statement"

_quote_pairs = {"'": "'", '"': '"', "`": "`", "[": "]"}
_expected_re = re.compile(
    r"^\s*Expected(?P<error>\s+error)?\s*:\s*(?P<rest>.*?)\s*$",
    re.IGNORECASE)
_count_re = re.compile(
    r"^(?P<count>\S+)\s+rows?(?P<affected>\s+affected)?"
    r"(?:\s*\((?P<note>[^)]*)\))?$",
    re.IGNORECASE)
_tier_re = re.compile(
    r"^\s*(?:(?P<tier>BRONZE|SILVER|GOLD)\s+CHALLENGES?|"
    r"(?P<experiment>EXPERIMENTS?))\s*$")
_heading_re = re.compile(r"^\s*(?P<name>[A-Z]+)\s+CHALLENGES?\s*$")
_underline_re = re.compile(r"^\s*-{3,}\s*$")
_directive_re = re.compile(
    r"^\s*(?P<name>Lesson|Requires)\s*:\s*(?P<value>.*?)\s*$")
_number_re = re.compile(r"^\s*(?P<number>\d+)\.\s+")
_lesson_file_re = re.compile(r"^(?:\d+_)?(?P<slug>[a-z0-9_]+)\.sql$")


def split_script(text, source=None):
    """Split a SQL script into comment and statement segments.

    Quoted text (``'..'``, ``".."``, ```..``` and ``[..]``) protects
    semicolons and comment markers. Comments found inside a statement
    stay part of that statement. Consecutive ``--`` lines with no blank
    line between them are merged into one comment segment.

    :param str text: Full text of the script.
    :param source: Name used in error messages.
    :type source: str or None
    :raises LessonSyntaxError: For an unterminated string or block
        comment.
    :return: List of :data:`Segment` tuples. Statement text has the
        trailing semicolon removed.
    :rtype: list

    """
    segments = []
    buffer = []
    buffer_line = None
    index = 0
    line = 1
    length = len(text)
    last_line_comment_end = None

    def emit_comment(comment_text, start_line, is_line_comment):
        if (is_line_comment and segments and
                segments[-1].kind == COMMENT and
                last_line_comment_end == start_line - 1):
            previous = segments.pop()
            comment_text = previous.text + "\n" + comment_text
            start_line = previous.line
        segments.append(Segment(COMMENT, comment_text, start_line))

    while index < length:
        char = text[index]
        in_statement = buffer_line is not None
        if char == "-" and text.startswith("--", index):
            end = text.find("\n", index)
            if end == -1:
                end = length
            if in_statement:
                buffer.append(text[index:end])
            else:
                body = text[index + 2:end]
                emit_comment(body[1:] if body.startswith(" ") else body,
                             line, True)
                last_line_comment_end = line
            index = end
            continue
        if char == "/" and text.startswith("/*", index):
            end = text.find("*/", index + 2)
            if end == -1:
                raise LessonSyntaxError(
                    message="Unterminated block comment.",
                    code="unterminated_comment",
                    line=line,
                    source=source)
            body = text[index + 2:end]
            if in_statement:
                buffer.append(text[index:end + 2])
            else:
                emit_comment(_clean_block(body), line, False)
                last_line_comment_end = None
            line += body.count("\n")
            index = end + 2
            continue
        if char in _quote_pairs:
            closing = _quote_pairs[char]
            end = text.find(closing, index + 1)
            if end == -1:
                raise LessonSyntaxError(
                    message="Unterminated quoted text.",
                    code="unterminated_string",
                    line=line,
                    source=source)
            if buffer_line is None:
                buffer_line = line
            quoted = text[index:end + 1]
            buffer.append(quoted)
            line += quoted.count("\n")
            index = end + 1
            continue
        if char == ";":
            if in_statement:
                segments.append(
                    Segment(STATEMENT, "".join(buffer).strip(), buffer_line))
            buffer = []
            buffer_line = None
            index += 1
            continue
        if char == "\n":
            line += 1
        elif buffer_line is None and not char.isspace():
            buffer_line = line
        buffer.append(char)
        index += 1
    pending = "".join(buffer).strip()
    if pending:
        segments.append(Segment(STATEMENT, pending, buffer_line))
    return segments


def _clean_block(body):
    """Dedent the body of a ``/* */`` comment."""
    lines = body.split("\n")
    first = lines[0].strip()
    rest = textwrap.dedent("\n".join(lines[1:]))
    return "\n".join([first, rest] if first else [rest]).strip("\n")


def parse_expectation(text, line=None, source=None):
    """Find the last ``Expected`` directive in a block of comment text.

    :param str text: Narrative or prompt text.
    :param line: Line the text starts on, used in error messages.
    :param source: Name used in error messages.
    :raises LessonSyntaxError: If a directive can't be understood.
    :return: The expectation, or ``None`` when the text states none.
    :rtype: :class:`~chinooklessons.lesson.Expectation` or None

    """
    lines = text.split("\n")
    position = None
    for index, text_line in enumerate(lines):
        if _expected_re.match(text_line):
            position = index
    if position is None:
        return None
    error_line = line + position if line is not None else None
    match = _expected_re.match(lines[position])
    rest = match.group("rest")
    if match.group("error"):
        if not rest:
            raise LessonSyntaxError(
                message="Expected error needs the text of the error.",
                code="missing_error_text",
                line=error_line,
                source=source)
        return Expectation(Expectation.ERROR, error=rest)
    table = []
    for text_line in lines[position + 1:]:
        if not text_line.strip() or _expected_re.match(text_line):
            break
        table.append(text_line)
    if not rest:
        if not table:
            raise LessonSyntaxError(
                message="Expected result is empty.",
                code="empty_expectation",
                line=error_line,
                source=source)
        return Expectation.from_table_lines(table)
    count_match = _count_re.match(rest)
    if count_match is None:
        return Expectation(Expectation.SCALAR, value=rest)
    try:
        count = int(count_match.group("count"))
    except ValueError:
        raise LessonSyntaxError(
            message="Row count must be a whole number.",
            code="invalid_count",
            line=error_line,
            source=source,
            count=count_match.group("count"))
    if count_match.group("affected"):
        return Expectation(Expectation.AFFECTED, count=count)
    if not table:
        return Expectation(Expectation.ROWS, count=count)
    note = (count_match.group("note") or "").lower()
    if "starting" in note:
        mode = Expectation.PREFIX
    elif "sample" in note:
        mode = Expectation.SAMPLE
    else:
        mode = Expectation.EXACT
    return Expectation.from_table_lines(table, count=count, mode=mode)


class LessonParser(object):

    """Builds a :class:`~chinooklessons.lesson.Lesson` from a script."""

    def __init__(self, slug, source=None):
        self.slug = slug
        self.source = source or slug
        self.title = None
        self.requires = []
        self.tier = None
        self.pending = []
        self.steps = []
        self.challenges = []
        self.current_challenge = None

    def parse(self, text):
        """Parse the full text of a lesson script.

        :param str text: The script.
        :rtype: :class:`~chinooklessons.lesson.Lesson`

        """
        for segment in split_script(text, source=self.source):
            if segment.kind == COMMENT:
                self._handle_comment(segment)
            else:
                self._handle_statement(segment)
        return Lesson(
            slug=self.slug,
            title=self.title or self.slug.replace("_", " ").title(),
            requires=self.requires,
            steps=self.steps,
            challenges=self.challenges,
            source=self.source)

    def _handle_comment(self, segment):
        kept = []
        skip_underline = False
        for text_line in segment.text.split("\n"):
            if skip_underline and _underline_re.match(text_line):
                skip_underline = False
                continue
            skip_underline = False
            directive = _directive_re.match(text_line)
            if directive:
                self._apply_directive(directive)
                continue
            tier = _tier_re.match(text_line)
            if tier:
                self.tier = (tier.group("tier") or "experiment").lower()
                self.current_challenge = None
                # narrative before the first heading introduces the
                # challenges, it belongs to no step
                self.pending = []
                kept = []
                skip_underline = True
                continue
            heading = _heading_re.match(text_line)
            if heading:
                raise LessonSyntaxError(
                    message="Unknown challenge tier: %s" % (
                        heading.group("name")),
                    code="unknown_tier",
                    line=segment.line,
                    source=self.source)
            kept.append(text_line)
        body = textwrap.dedent("\n".join(kept)).strip("\n")
        if not body.strip():
            return
        if self.tier is None:
            self.pending.append((body, segment.line))
        else:
            self._add_challenge(body, segment.line)

    def _apply_directive(self, match):
        value = match.group("value")
        if match.group("name") == "Lesson":
            self.title = value
        else:
            self.requires.extend(
                name.strip() for name in value.split(",") if name.strip())

    def _add_challenge(self, body, line):
        number_match = _number_re.match(body)
        if number_match:
            number = int(number_match.group("number"))
            body = body[number_match.end():]
        elif self.challenges:
            number = self.challenges[-1].number + 1
        else:
            number = 1
        prompt = textwrap.dedent(body).strip()
        challenge = Challenge(
            tier=self.tier,
            number=number,
            prompt=prompt,
            expectation=parse_expectation(
                prompt, line=line, source=self.source),
            line=line)
        self.challenges.append(challenge)
        self.current_challenge = challenge

    def _handle_statement(self, segment):
        if self.tier is not None:
            challenge = self.current_challenge
            if challenge is None or challenge.solution is not None:
                raise LessonSyntaxError(
                    message="Statement in the challenges has no prompt.",
                    code="orphan_statement",
                    line=segment.line,
                    source=self.source)
            challenge.solution = segment.text
            return
        narrative = "\n\n".join(body for body, _ in self.pending)
        expectation = None
        for body, line in reversed(self.pending):
            expectation = parse_expectation(
                body, line=line, source=self.source)
            if expectation is not None:
                break
        self.steps.append(Step(
            number=len(self.steps) + 1,
            narrative=narrative,
            sql=segment.text,
            expectation=expectation,
            line=segment.line))
        self.pending = []


def parse_lesson(text, slug, source=None):
    """Parse a lesson script.

    :param str text: The lesson script.
    :param str slug: Short name of the lesson.
    :param source: Name used in error messages, defaults to ``slug``.
    :rtype: :class:`~chinooklessons.lesson.Lesson`

    """
    lesson = LessonParser(slug, source=source).parse(text)
    logger.debug("Parsed lesson %s: %s steps, %s challenges",
                 slug, len(lesson.steps), len(lesson.challenges))
    return lesson


def _lesson_files():
    """Bundled lesson files keyed by slug, in lesson order."""
    directory = resources.files("chinooklessons").joinpath("lessons")
    files = collections.OrderedDict()
    for entry in sorted(directory.iterdir(), key=lambda e: e.name):
        match = _lesson_file_re.match(entry.name)
        if match:
            files[match.group("slug")] = entry
    return files


def available_lessons():
    """Slugs of the bundled lessons, in the order they're taught.

    :rtype: list

    """
    return list(_lesson_files())


def load_lesson(slug):
    """Load a bundled lesson.

    :param str slug: Short name of the lesson, e.g. ``"selecting"``.
    :raises LessonNotFound: If no bundled lesson has that name.
    :rtype: :class:`~chinooklessons.lesson.Lesson`

    """
    files = _lesson_files()
    if slug not in files:
        raise LessonNotFound(slug)
    text = files[slug].read_text(encoding="utf-8")
    return parse_lesson(text, slug, source=files[slug].name)


def load_lesson_file(path):
    """Load a lesson from any file on disk.

    The slug is taken from the file name, minus any numeric prefix.

    :param str path: Path to a ``.sql`` lesson script.
    :raises LessonNotFound: If the file doesn't exist.
    :rtype: :class:`~chinooklessons.lesson.Lesson`

    """
    if not os.path.isfile(path):
        raise LessonNotFound(path)
    name = os.path.basename(path)
    match = _lesson_file_re.match(name.lower())
    slug = match.group("slug") if match else os.path.splitext(name)[0]
    with open(path, encoding="utf-8") as f:
        return parse_lesson(f.read(), slug, source=path)


def resolve_requirements(lesson, loader=None):
    """Lessons that must run before ``lesson``, in run order.

    :param lesson: The lesson being run.
    :param loader: Callable taking a slug and returning a lesson.
        Defaults to :func:`load_lesson`.
    :raises LessonSyntaxError: If the requirements are circular.
    :raises LessonNotFound: If a required lesson doesn't exist.
    :rtype: list

    """
    if loader is None:
        loader = load_lesson
    ordered = []
    seen = set()

    def visit(current, chain):
        for slug in current.requires:
            if slug in chain:
                raise LessonSyntaxError(
                    message="Circular lesson requirement: %s" % " -> ".join(
                        chain + [slug]),
                    code="circular_requirement",
                    source=lesson.source)
            if slug in seen:
                continue
            required = loader(slug)
            visit(required, chain + [slug])
            seen.add(slug)
            ordered.append(required)

    visit(lesson, [lesson.slug])
    return ordered
