## -*- coding: utf-8 -*-\
"""
    chinooklessons.exceptions
    ~~~~~~~~~~~~~~~~~~~~~~~~~

    Exceptions raised while loading and running lessons.

    Errors produced by the SQL in a lesson or in a learner's answer are
    never raised, they are captured on the result objects instead.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.


class LessonException(Exception):

    """Generic exception class for lesson problems."""

    pass


class LessonSyntaxError(LessonException):

    """A lesson script could not be parsed."""

    def __init__(self, message, code, line=None, source=None, **kwargs):
        """Initializes a new error.

        :param str message: Description of the error.
        :param str code: A standardized descriptive error code, to make
            external reporting easier.
        :param line: One based line number the error applies to, if
            known.
        :type line: int or None
        :param source: Name of the lesson or file being parsed.
        :type source: str or None
        :param dict kwargs: Any additional arguments may be stored along
            with the message as well.

        """
        self.message = message
        self.code = code
        self.line = line
        self.source = source
        self.kwargs = kwargs
        super(LessonSyntaxError, self).__init__(str(self))

    def __str__(self):
        location = self.source or "<lesson>"
        if self.line is not None:
            location = "%s:%s" % (location, self.line)
        return "%s: %s" % (location, self.message)


class LessonNotFound(LessonException):

    """No lesson exists with the requested slug or path."""

    def __init__(self, slug):
        self.slug = slug
        super(LessonNotFound, self).__init__(
            "No lesson named %r." % (slug,))


class ChallengeNotFound(LessonException):

    """A lesson has no challenge with the requested number."""

    def __init__(self, slug, number):
        self.slug = slug
        self.number = number
        super(ChallengeNotFound, self).__init__(
            "Lesson %r has no challenge %s." % (slug, number))


class DatasetError(LessonException):

    """The Chinook dataset is missing or can't be installed."""

    pass
