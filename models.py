# models.py
import uuid
from datetime import date

from sqlalchemy import Column, Date, Enum, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from database import Base

BOOKINSTANCE_STATUSES = ("Available", "Maintenance", "Loaned", "Reserved")
DEFAULT_STATUS = "Maintenance"
NAME_MAX_LENGTH = 100


def new_id() -> str:
    return uuid.uuid4().hex


def format_date(value) -> str:
    """'Jan 5, 1990' style, empty when there is no date."""
    if not value:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


def iso_date(value) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return value or ""


book_genre = Table(
    "book_genre",
    Base.metadata,
    Column("book_id", String(32), ForeignKey("books.id"), primary_key=True),
    Column("genre_id", String(32), ForeignKey("genres.id"), primary_key=True),
)


class Author(Base):
    __tablename__ = "authors"
    id = Column(String(32), primary_key=True, default=new_id)
    first_name = Column(String(NAME_MAX_LENGTH), nullable=False)
    family_name = Column(String(NAME_MAX_LENGTH), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)

    @property
    def name(self) -> str:
        return f"{self.family_name}, {self.first_name}"

    @property
    def url(self) -> str:
        return f"/catalog/author/{self.id}"

    @property
    def lifespan(self) -> str:
        return f"{format_date(self.date_of_birth)} - {format_date(self.date_of_death)}"

    @property
    def date_of_birth_yyyy_mm_dd(self) -> str:
        return iso_date(self.date_of_birth)

    @property
    def date_of_death_yyyy_mm_dd(self) -> str:
        return iso_date(self.date_of_death)


class Genre(Base):
    __tablename__ = "genres"
    # name is deliberately not unique; duplicates are filtered on create only
    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String(NAME_MAX_LENGTH), nullable=False, index=True)

    @property
    def url(self) -> str:
        return f"/catalog/genre/{self.id}"


class Book(Base):
    __tablename__ = "books"
    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String, nullable=False, index=True)
    author_id = Column(String(32), ForeignKey("authors.id"), nullable=False, index=True)
    summary = Column(Text, nullable=False)
    isbn = Column(String, nullable=False)

    author = relationship(Author, lazy="selectin")
    genre = relationship(Genre, secondary=book_genre, lazy="selectin", order_by=Genre.name)

    @property
    def url(self) -> str:
        return f"/catalog/book/{self.id}"


class BookInstance(Base):
    __tablename__ = "bookinstances"
    id = Column(String(32), primary_key=True, default=new_id)
    book_id = Column(String(32), ForeignKey("books.id"), nullable=False, index=True)
    imprint = Column(String, nullable=False)
    status = Column(
        Enum(*BOOKINSTANCE_STATUSES, name="bookinstance_status", validate_strings=True),
        nullable=False,
        default=DEFAULT_STATUS,
    )
    due_back = Column(Date, nullable=False, default=date.today)

    book = relationship(Book, lazy="selectin")

    @property
    def url(self) -> str:
        return f"/catalog/bookinstance/{self.id}"

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back)

    @property
    def due_back_yyyy_mm_dd(self) -> str:
        return iso_date(self.due_back)
