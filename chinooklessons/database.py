## -*- coding: utf-8 -*-\
"""
    chinooklessons.database
    ~~~~~~~~~~~~~~~~~~~~~~~

    Creating, installing and checking the Chinook database the lessons
    run against.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import logging
import os
import tempfile

import requests
from sqlalchemy import create_engine, event, func, inspect, select

from chinooklessons.exceptions import DatasetError
from chinooklessons.models import (
    CHINOOK_ROW_COUNTS, CHINOOK_TABLES, Note, metadata)

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///chinook.sqlite"
# Release of the dataset whose invoice dates (2009 to 2013) and row
# counts the lessons were written against.
CHINOOK_SQL_URL = (
    "https://raw.githubusercontent.com/lerocha/chinook-database/v1.4/"
    "ChinookDatabase/DataSources/Chinook_Sqlite.sql")


def database_url(url=None):
    """Work out which database to use.

    :param url: Explicit SQLAlchemy URL, takes priority when given.
    :type url: str or None
    :return: ``url``, else the ``CHINOOK_DATABASE_URL`` environment
        variable, else a ``chinook.sqlite`` file in the working
        directory.
    :rtype: str

    """
    return url or os.environ.get("CHINOOK_DATABASE_URL") or \
        DEFAULT_DATABASE_URL


def sqlite_url(path):
    """SQLAlchemy URL for a SQLite file path."""
    return "sqlite+pysqlite:///" + os.path.abspath(path)


def _check_database_file(url, create):
    database = url.database
    if create or url.query.get("uri") or database in (None, "", ":memory:"):
        return
    if not os.path.exists(database):
        raise DatasetError(
            "%s doesn't exist, run 'chinook-lessons install' first." %
            database)


def create_lesson_engine(url=None, foreign_keys=False, echo=False,
                         create=False):
    """Create an engine suitable for running lessons.

    For SQLite, pysqlite's own transaction handling is switched off so
    that DDL statements and SAVEPOINTs behave transactionally, letting
    a whole lesson be rolled back.

    :param url: SQLAlchemy database URL, see :func:`database_url`.
    :param bool foreign_keys: Enforce foreign keys on SQLite. Off by
        default, the same as a plain SQLite client, which is what the
        deleting lesson relies on to show dangling rows.
    :param bool echo: Log every statement through SQLAlchemy.
    :param bool create: Allow a SQLite file that doesn't exist yet. SQLite
        would otherwise create an empty file in its place.
    :raises DatasetError: If the SQLite file is missing and ``create``
        isn't set.
    :rtype: :class:`~sqlalchemy.engine.Engine`

    """
    url = database_url(url)
    engine = create_engine(url, echo=echo)
    if engine.dialect.name == "sqlite":
        _check_database_file(engine.url, create)

        @event.listens_for(engine, "connect")
        def do_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            if foreign_keys:
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys = ON")
                cursor.close()

        @event.listens_for(engine, "begin")
        def do_begin(conn):
            conn.exec_driver_sql("BEGIN")
    logger.debug("Created lesson engine for %s", engine.url)
    return engine


def create_schema(engine, include_notes=False):
    """Create empty Chinook tables.

    :param engine: Engine to create the tables with.
    :param bool include_notes: Also create the ``Note`` table that the
        inserting lesson normally creates.

    """
    tables = list(CHINOOK_TABLES)
    if include_notes:
        tables.append(Note.__table__)
    metadata.create_all(engine, tables=tables)


def table_counts(engine, tables=None):
    """Count the rows in each Chinook table.

    :param engine: Engine for the database to inspect.
    :param tables: Table names to count, defaults to every Chinook
        table present in the database.
    :type tables: list or None
    :return: Dict of table name to row count.
    :rtype: dict

    """
    existing = set(inspect(engine).get_table_names())
    if tables is None:
        tables = [table.name for table in CHINOOK_TABLES
                  if table.name in existing]
    counts = {}
    with engine.connect() as conn:
        for name in tables:
            if name not in existing:
                raise DatasetError("Table %s doesn't exist." % name)
            table = metadata.tables[name]
            counts[name] = conn.execute(
                select(func.count()).select_from(table)).scalar()
    return counts


def verify_chinook(engine):
    """Compare a database against the reference Chinook row counts.

    :param engine: Engine for the database to check.
    :raises DatasetError: If any Chinook table is missing.
    :return: Dict of table name to an ``(expected, actual)`` tuple for
        each table whose row count differs. Empty when the database
        matches the reference dataset.
    :rtype: dict

    """
    existing = set(inspect(engine).get_table_names())
    missing = [name for name in CHINOOK_ROW_COUNTS if name not in existing]
    if missing:
        raise DatasetError(
            "Not a Chinook database, missing tables: %s" %
            ", ".join(missing))
    counts = table_counts(engine, tables=list(CHINOOK_ROW_COUNTS))
    mismatches = {}
    for name, expected in CHINOOK_ROW_COUNTS.items():
        if counts[name] != expected:
            mismatches[name] = (expected, counts[name])
    return mismatches


def download_chinook_script(url=None, timeout=60):
    """Download the SQL script that builds the Chinook database.

    :param url: Location of the script. Defaults to the
        ``CHINOOK_SQL_URL`` environment variable, then
        :data:`CHINOOK_SQL_URL`.
    :param int timeout: Seconds to wait for the server.
    :raises DatasetError: If the download fails.
    :rtype: str

    """
    url = url or os.environ.get("CHINOOK_SQL_URL") or CHINOOK_SQL_URL
    logger.info("Downloading Chinook script from %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise DatasetError("Unable to download %s: %s" % (url, exc))
    # the published script starts with a byte order mark
    return response.content.decode("utf-8-sig")


def load_chinook_script(engine, script):
    """Run a full SQL script, such as the Chinook build script.

    :param engine: Engine for a SQLite database.
    :param str script: Semicolon separated SQL statements.
    :raises DatasetError: If the script fails.

    """
    raw = engine.raw_connection()
    try:
        raw.driver_connection.executescript(script)
        raw.commit()
    except engine.dialect.loaded_dbapi.Error as exc:
        raise DatasetError("Unable to load the Chinook script: %s" % exc)
    finally:
        raw.close()


def install_chinook(path, url=None, force=False, timeout=60):
    """Download the Chinook dataset into a new SQLite file.

    The database is built in a temporary file next to ``path`` and only
    moved into place once the script has loaded, so a failed download
    or load leaves any existing file untouched.

    :param str path: File to create.
    :param url: Location of the build script, see
        :func:`download_chinook_script`.
    :param bool force: Replace ``path`` if it already exists.
    :param int timeout: Seconds to wait for the server.
    :raises DatasetError: If ``path`` exists and ``force`` isn't set,
        or the download or load fails.
    :return: Engine for the new database.

    """
    if os.path.exists(path) and not force:
        raise DatasetError(
            "%s already exists, use force to replace it." % path)
    script = download_chinook_script(url, timeout=timeout)
    handle, building = tempfile.mkstemp(
        suffix=".sqlite", dir=os.path.dirname(os.path.abspath(path)))
    os.close(handle)
    engine = create_lesson_engine(sqlite_url(building), create=True)
    try:
        load_chinook_script(engine, script)
    except Exception:
        engine.dispose()
        os.remove(building)
        raise
    engine.dispose()
    os.replace(building, path)
    engine = create_lesson_engine(sqlite_url(path))
    mismatches = verify_chinook(engine)
    for name, (expected, actual) in sorted(mismatches.items()):
        logger.warning(
            "%s has %s rows, lessons expect %s", name, actual, expected)
    logger.info("Installed Chinook database at %s", path)
    return engine
