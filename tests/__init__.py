"""
    tests.__init__
    ~~~~~~~~~~~~~~

    Tests for parsing, running and checking lessons.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
