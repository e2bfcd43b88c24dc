## -*- coding: utf-8 -*-\
"""
    chinooklessons.models
    ~~~~~~~~~~~~~~~~~~~~~

    SQLAlchemy models for the Chinook database the lessons query.

    Chinook models a digital music store: the catalogue (artists,
    albums, tracks, genres and media types), playlists, and the sales
    side (employees, customers, invoices and their lines). Attribute
    names are the Chinook column names, so the models read the same as
    the raw SQL in the lessons.

"""
# :copyright: (c) 2026 by the ChinookLessons contributors.
#             See AUTHORS for more details.
# :license: MIT - See LICENSE for more details.
from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, \
    Table, Unicode
from sqlalchemy.orm import backref, declarative_base, relationship


Base = declarative_base()
metadata = Base.metadata


class Artist(Base):

    """A recording artist. The selecting lesson starts here."""

    __tablename__ = 'Artist'

    ArtistId = Column(Integer, primary_key=True)
    Name = Column(Unicode(120))


class Album(Base):

    """An album, always by a single artist."""

    __tablename__ = 'Album'

    AlbumId = Column(Integer, primary_key=True)
    Title = Column(Unicode(160), nullable=False)
    ArtistId = Column(
        ForeignKey('Artist.ArtistId'), nullable=False, index=True)

    Artist = relationship('Artist', backref=backref('Albums'))


class Genre(Base):

    __tablename__ = 'Genre'

    GenreId = Column(Integer, primary_key=True)
    Name = Column(Unicode(120))


class MediaType(Base):

    """File format a track is sold in, e.g. ``MPEG audio file``."""

    __tablename__ = 'MediaType'

    MediaTypeId = Column(Integer, primary_key=True)
    Name = Column(Unicode(120))


class Track(Base):

    """A track for sale.

    ``AlbumId`` and ``GenreId`` may be ``NULL``. ``MediaTypeId`` is
    required, and the inserting lesson has a broken ``INSERT`` that
    leaves it out.

    """

    __tablename__ = 'Track'

    TrackId = Column(Integer, primary_key=True)
    Name = Column(Unicode(200), nullable=False)
    AlbumId = Column(ForeignKey('Album.AlbumId'), index=True)
    MediaTypeId = Column(
        ForeignKey('MediaType.MediaTypeId'), nullable=False, index=True)
    GenreId = Column(ForeignKey('Genre.GenreId'), index=True)
    Composer = Column(Unicode(220))
    Milliseconds = Column(Integer, nullable=False)
    Bytes = Column(Integer)
    UnitPrice = Column(Numeric(10, 2), nullable=False)

    Album = relationship('Album', backref=backref('Tracks'))
    Genre = relationship('Genre')
    MediaType = relationship('MediaType')


t_PlaylistTrack = Table(
    'PlaylistTrack', metadata,
    Column('PlaylistId', ForeignKey('Playlist.PlaylistId'),
           primary_key=True, nullable=False),
    Column('TrackId', ForeignKey('Track.TrackId'),
           primary_key=True, nullable=False, index=True)
)


class Playlist(Base):

    """A named playlist. Tracks are linked through ``PlaylistTrack``."""

    __tablename__ = 'Playlist'

    PlaylistId = Column(Integer, primary_key=True)
    Name = Column(Unicode(120))

    Tracks = relationship('Track', secondary=t_PlaylistTrack)


class Employee(Base):

    """Store staff. ``ReportsTo`` points at the employee's manager."""

    __tablename__ = 'Employee'

    EmployeeId = Column(Integer, primary_key=True)
    LastName = Column(Unicode(20), nullable=False)
    FirstName = Column(Unicode(20), nullable=False)
    Title = Column(Unicode(30))
    ReportsTo = Column(ForeignKey('Employee.EmployeeId'), index=True)
    BirthDate = Column(DateTime)
    HireDate = Column(DateTime)
    Address = Column(Unicode(70))
    City = Column(Unicode(40))
    State = Column(Unicode(40))
    Country = Column(Unicode(40))
    PostalCode = Column(Unicode(10))
    Phone = Column(Unicode(24))
    Fax = Column(Unicode(24))
    Email = Column(Unicode(60))

    Manager = relationship(
        'Employee', remote_side=[EmployeeId], backref=backref('Reports'))


class Customer(Base):

    """A customer, looked after by a sales support agent."""

    __tablename__ = 'Customer'

    CustomerId = Column(Integer, primary_key=True)
    FirstName = Column(Unicode(40), nullable=False)
    LastName = Column(Unicode(20), nullable=False)
    Company = Column(Unicode(80))
    Address = Column(Unicode(70))
    City = Column(Unicode(40))
    State = Column(Unicode(40))
    Country = Column(Unicode(40))
    PostalCode = Column(Unicode(10))
    Phone = Column(Unicode(24))
    Fax = Column(Unicode(24))
    Email = Column(Unicode(60), nullable=False)
    SupportRepId = Column(ForeignKey('Employee.EmployeeId'), index=True)

    SupportRep = relationship('Employee', backref=backref('Customers'))


class Invoice(Base):

    """A sale to one customer.

    ``Total`` is stored, not computed. The aggregating lesson checks it
    against the sum of the invoice's lines.

    """

    __tablename__ = 'Invoice'

    InvoiceId = Column(Integer, primary_key=True)
    CustomerId = Column(
        ForeignKey('Customer.CustomerId'), nullable=False, index=True)
    InvoiceDate = Column(DateTime, nullable=False)
    BillingAddress = Column(Unicode(70))
    BillingCity = Column(Unicode(40))
    BillingState = Column(Unicode(40))
    BillingCountry = Column(Unicode(40))
    BillingPostalCode = Column(Unicode(10))
    Total = Column(Numeric(10, 2), nullable=False)

    Customer = relationship('Customer', backref=backref('Invoices'))


class InvoiceLine(Base):

    __tablename__ = 'InvoiceLine'

    InvoiceLineId = Column(Integer, primary_key=True)
    InvoiceId = Column(
        ForeignKey('Invoice.InvoiceId'), nullable=False, index=True)
    TrackId = Column(ForeignKey('Track.TrackId'), nullable=False, index=True)
    UnitPrice = Column(Numeric(10, 2), nullable=False)
    Quantity = Column(Integer, nullable=False)

    Invoice = relationship('Invoice', backref=backref('Lines'))
    Track = relationship('Track')


class Note(Base):

    """Learner notes about a track, created by the inserting lesson.

    Not part of the reference Chinook dataset.

    """

    __tablename__ = 'Note'
    __table_args__ = {'sqlite_autoincrement': True}

    NoteId = Column(Integer, primary_key=True)
    CustomerId = Column(
        ForeignKey('Customer.CustomerId'), nullable=False, index=True)
    TrackId = Column(ForeignKey('Track.TrackId'), nullable=False, index=True)
    Text = Column(Unicode(150), nullable=False)

    Customer = relationship('Customer')
    Track = relationship('Track')


#: Tables of the reference dataset, in dependency order.
CHINOOK_TABLES = [
    Artist.__table__, Album.__table__, Genre.__table__,
    MediaType.__table__, Track.__table__, Playlist.__table__,
    t_PlaylistTrack, Employee.__table__, Customer.__table__,
    Invoice.__table__, InvoiceLine.__table__]

#: Row counts of the reference Chinook dataset.
CHINOOK_ROW_COUNTS = {
    'Artist': 275,
    'Album': 347,
    'Genre': 25,
    'MediaType': 5,
    'Track': 3503,
    'Playlist': 18,
    'PlaylistTrack': 8715,
    'Employee': 8,
    'Customer': 59,
    'Invoice': 412,
    'InvoiceLine': 2240,
}
