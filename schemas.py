from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from models import DEFAULT_STATUS, format_date, iso_date

# Sanitized form candidates. They are built from validated form data and, on
# failure, handed back to the form templates so nothing the user typed is lost.
# Invalid dates stay as the submitted string, hence the unions.


class AuthorForm(BaseModel):
    id: Optional[str] = None
    first_name: str = ""
    family_name: str = ""
    date_of_birth: Optional[Union[date, str]] = None
    date_of_death: Optional[Union[date, str]] = None

    @property
    def name(self) -> str:
        return f"{self.family_name}, {self.first_name}"

    @property
    def date_of_birth_yyyy_mm_dd(self) -> str:
        return iso_date(self.date_of_birth)

    @property
    def date_of_death_yyyy_mm_dd(self) -> str:
        return iso_date(self.date_of_death)


class GenreForm(BaseModel):
    id: Optional[str] = None
    name: str = ""


class BookForm(BaseModel):
    id: Optional[str] = None
    title: str = ""
    author: str = ""
    summary: str = ""
    isbn: str = ""
    genre: List[str] = Field(default_factory=list)


class BookInstanceForm(BaseModel):
    id: Optional[str] = None
    book: str = ""
    imprint: str = ""
    status: str = DEFAULT_STATUS
    due_back: Optional[Union[date, str]] = None

    @property
    def due_back_formatted(self) -> str:
        return format_date(self.due_back) if isinstance(self.due_back, date) else ""

    @property
    def due_back_yyyy_mm_dd(self) -> str:
        return iso_date(self.due_back)
