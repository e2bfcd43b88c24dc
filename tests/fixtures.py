"""
    tests.fixtures
    ~~~~~~~~~~~~~~

    A small database shaped like Chinook, and lesson scripts to run
    against it.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
import datetime
import os
import shutil
import tempfile
import unittest

from sqlalchemy.orm import Session

from chinooklessons.database import (
    create_lesson_engine, create_schema, sqlite_url)
from chinooklessons.models import (
    Album, Artist, Customer, Employee, Genre, Invoice, InvoiceLine,
    MediaType, Playlist, Track)


def populate(engine):
    """Fill an empty schema with a handful of Chinook rows."""
    with Session(engine) as session:
        rock = Genre(GenreId=1, Name="Rock")
        jazz = Genre(GenreId=2, Name="Jazz")
        mpeg = MediaType(MediaTypeId=1, Name="MPEG audio file")
        aac = MediaType(MediaTypeId=2, Name="Protected AAC audio file")
        acdc = Artist(ArtistId=1, Name="AC/DC")
        accept = Artist(ArtistId=2, Name="Accept")
        u2 = Artist(ArtistId=150, Name="U2")
        for_those = Album(
            AlbumId=1, Title="For Those About To Rock We Salute You",
            Artist=acdc)
        balls = Album(AlbumId=2, Title="Balls to the Wall", Artist=accept)
        achtung = Album(AlbumId=232, Title="Achtung Baby", Artist=u2)
        tracks = [
            Track(TrackId=1, Name="For Those About To Rock (We Salute You)",
                  Album=for_those, MediaType=mpeg, Genre=rock,
                  Composer="Angus Young, Malcolm Young, Brian Johnson",
                  Milliseconds=343719, Bytes=11170334, UnitPrice=0.99),
            Track(TrackId=2, Name="Balls to the Wall", Album=balls,
                  MediaType=aac, Genre=rock, Milliseconds=342562,
                  Bytes=5510424, UnitPrice=0.99),
            Track(TrackId=3, Name="One", Album=achtung, MediaType=mpeg,
                  Genre=rock, Composer="U2", Milliseconds=276192,
                  Bytes=9056456, UnitPrice=0.99),
            Track(TrackId=4, Name="Mysterious Ways", Album=achtung,
                  MediaType=mpeg, Genre=rock, Composer="U2",
                  Milliseconds=243826, Bytes=7998226, UnitPrice=0.99),
            Track(TrackId=5, Name="Desafinado", Album=for_those,
                  MediaType=mpeg, Genre=jazz, Milliseconds=185338,
                  Bytes=5990473, UnitPrice=0.99),
        ]
        playlist = Playlist(
            PlaylistId=1, Name="Music", Tracks=[tracks[0], tracks[2]])
        manager = Employee(
            EmployeeId=1, LastName="Adams", FirstName="Andrew",
            Title="General Manager",
            HireDate=datetime.datetime(2002, 8, 14))
        agent = Employee(
            EmployeeId=2, LastName="Edwards", FirstName="Nancy",
            Title="Sales Manager", Manager=manager,
            HireDate=datetime.datetime(2002, 5, 1))
        frank_harris = Customer(
            CustomerId=1, FirstName="Frank", LastName="Harris",
            City="Mountain View", Country="USA",
            Email="fharris@google.com", SupportRep=agent)
        frank_ralston = Customer(
            CustomerId=2, FirstName="Frank", LastName="Ralston",
            City="Chicago", Country="USA",
            Email="fralston@gmail.com", SupportRep=agent)
        leonie = Customer(
            CustomerId=3, FirstName="Leonie", LastName="Köhler",
            City="Stuttgart", Country="Germany",
            Email="leonekohler@surfeu.de", SupportRep=agent)
        first = Invoice(
            InvoiceId=1, Customer=leonie,
            InvoiceDate=datetime.datetime(2009, 1, 1),
            BillingCity="Stuttgart", Total=1.98)
        second = Invoice(
            InvoiceId=2, Customer=frank_harris,
            InvoiceDate=datetime.datetime(2009, 1, 2),
            BillingCity="Mountain View", Total=3.96)
        lines = [
            InvoiceLine(InvoiceLineId=1, Invoice=first, Track=tracks[0],
                        UnitPrice=0.99, Quantity=1),
            InvoiceLine(InvoiceLineId=2, Invoice=first, Track=tracks[1],
                        UnitPrice=0.99, Quantity=1),
            InvoiceLine(InvoiceLineId=3, Invoice=second, Track=tracks[2],
                        UnitPrice=0.99, Quantity=2),
            InvoiceLine(InvoiceLineId=4, Invoice=second, Track=tracks[3],
                        UnitPrice=0.99, Quantity=2),
        ]
        session.add_all(
            [rock, jazz, mpeg, aac, playlist, frank_ralston] + tracks +
            lines)
        session.commit()


class FixtureDatabaseTestCase(unittest.TestCase):

    """Base test case with a fresh fixture database per test."""

    def setUp(self):
        """Build the fixture database in a temporary directory."""
        self.tmp_dir = tempfile.mkdtemp()
        self.db_path = os.path.join(self.tmp_dir, "fixture.sqlite")
        self.db_url = sqlite_url(self.db_path)
        self.db_engine = create_lesson_engine(self.db_url, create=True)
        create_schema(self.db_engine)
        populate(self.db_engine)

    def tearDown(self):
        self.db_engine.dispose()
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def scalar(self, sql):
        """Run a query outside any lesson and return its first value."""
        with self.db_engine.connect() as conn:
            return conn.exec_driver_sql(sql).scalar()


FIXTURE_LESSON = """\
-- Lesson : Fixture Lesson

-- Select a column from a table
-- Expected : 3 rows
select Name from Artist;

/*
   Tables that don't exist can't be queried.

   Expected error : no such table: Nope
*/
select * from Nope;

-- Expected : 1 row affected
insert into Artist (Name) values ('New Artist');

-- Expected : 4
select count(*) from Artist;

-- Expected : 2
select count(*) from Customer where FirstName = 'Frank';

-- Expected : 3.96
select sum(UnitPrice * Quantity) from InvoiceLine where InvoiceId = 2;

-- Statements with no expected result still run
select * from Track;
"""

FIXTURE_CHALLENGES = """\
-- Lesson : Fixture Challenges

select count(*) from Artist;

/*
  BRONZE CHALLENGES
  -----------------

  1. Select the names of all media types.

  Expected :
  MPEG audio file
  Protected AAC audio file
*/
select Name from MediaType;

/*
  2. Count the customers called Frank.

  Expected : 2
*/

/*
  SILVER CHALLENGES
  -----------------

  3. List the artist names in alphabetical order.
*/
select Name from Artist order by Name;

/*
  4. Which artists have no albums at all?
*/
"""
