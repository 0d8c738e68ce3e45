"""
Form validation and sanitization.

Each form is an ordered list of field chains. A chain is a sequence of
sanitizers (trim, escape, date conversion) and validators (length,
alphanumeric, ISO-8601 date) applied to one submitted value. Validators never
stop the chain: every failing check adds its own ``FieldError``, so a field can
report several problems at once. Nothing here talks to the store.
"""
from __future__ import annotations

from dataclasses import dataclass, field as dataclass_field
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from dateutil.parser import isoparse
from markupsafe import escape as markup_escape

from models import NAME_MAX_LENGTH

GENRE_NAME_MIN_LENGTH_CREATE = 1
GENRE_NAME_MIN_LENGTH_UPDATE = 3


@dataclass
class FieldError:
    field: str
    message: str
    value: Any = None

    # the templates read error.msg, as the original views did
    @property
    def msg(self) -> str:
        return self.message


@dataclass
class FormResult:
    data: Dict[str, Any]
    errors: List[FieldError] = dataclass_field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def as_list(value: Any) -> List[Any]:
    """Multi-select controls submit nothing, one value or many; always return a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def parse_iso_date(value: str) -> date:
    # reduced precision is allowed: "1973" and "1973-06" are the first day of the period
    return isoparse(value).date()


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return _to_str(value[0]) if value else ""
    return str(value)


class FieldChain:
    """Declarative rules for a single form field, run in declaration order."""

    def __init__(self, name: str, message: Optional[str] = None):
        self.name = name
        self.message = message or f"Invalid value for {name}"
        self.is_optional = False
        self.is_list = False
        self._steps: List[Callable[[Any, List[FieldError]], Any]] = []

    def optional(self) -> "FieldChain":
        """Skip the chain when the value is falsy and store None instead."""
        self.is_optional = True
        return self

    def each(self) -> "FieldChain":
        """Normalize the value to a list and run the chain on every element."""
        self.is_list = True
        return self

    def _sanitizer(self, fn: Callable[[Any], Any]) -> "FieldChain":
        self._steps.append(lambda value, errors: fn(value))
        return self

    def _validator(self, check: Callable[[Any], bool], message: Optional[str]) -> "FieldChain":
        text = message or self.message

        def step(value, errors):
            if not check(value):
                errors.append(FieldError(self.name, text, value))
            return value

        self._steps.append(step)
        return self

    def trim(self) -> "FieldChain":
        return self._sanitizer(lambda v: _to_str(v).strip())

    def escape(self) -> "FieldChain":
        return self._sanitizer(lambda v: str(markup_escape(_to_str(v))))

    def min_length(self, minimum: int, message: Optional[str] = None) -> "FieldChain":
        return self._validator(lambda v: len(_to_str(v)) >= minimum, message)

    def max_length(self, maximum: int, message: Optional[str] = None) -> "FieldChain":
        return self._validator(lambda v: len(_to_str(v)) <= maximum, message)

    def alphanumeric(self, message: Optional[str] = None) -> "FieldChain":
        # ASCII letters and digits only, and at least one of them
        return self._validator(lambda v: _to_str(v).isascii() and _to_str(v).isalnum(), message)

    def iso_date(self, message: Optional[str] = None) -> "FieldChain":
        text = message or self.message

        def step(value, errors):
            try:
                return parse_iso_date(_to_str(value))
            except (ValueError, OverflowError):
                errors.append(FieldError(self.name, text, value))
                return value

        self._steps.append(step)
        return self

    def _run_one(self, value: Any, errors: List[FieldError]) -> Any:
        if self.is_optional and not value:
            return None
        for step in self._steps:
            value = step(value, errors)
        return value

    def run(self, value: Any, errors: List[FieldError]) -> Any:
        if self.is_list:
            return [self._run_one(item, errors) for item in as_list(value)]
        return self._run_one(value, errors)


def body(name: str, message: Optional[str] = None) -> FieldChain:
    return FieldChain(name, message)


def validate(chains: Sequence[FieldChain], raw: Mapping[str, Any]) -> FormResult:
    errors: List[FieldError] = []
    data = {chain.name: chain.run(raw.get(chain.name), errors) for chain in chains}
    return FormResult(data=data, errors=errors)


# ─────────────────────── FORMS ───────────────────────

AUTHOR_FORM = [
    body("first_name").trim()
    .min_length(1, "First name must be specified.")
    .max_length(NAME_MAX_LENGTH, f"First name must not exceed {NAME_MAX_LENGTH} characters.")
    .escape()
    .alphanumeric("First name has non-alphanumeric characters."),
    body("family_name").trim()
    .min_length(1, "Family name must be specified.")
    .max_length(NAME_MAX_LENGTH, f"Family name must not exceed {NAME_MAX_LENGTH} characters.")
    .escape()
    .alphanumeric("Family name has non-alphanumeric characters."),
    body("date_of_birth", "Invalid date of birth").optional().iso_date(),
    body("date_of_death", "Invalid date of death").optional().iso_date(),
]

GENRE_CREATE_FORM = [
    body("name", "Genre name required").trim().min_length(GENRE_NAME_MIN_LENGTH_CREATE).escape(),
]

GENRE_UPDATE_FORM = [
    body("name", "Genre name must contain at least 3 characters").trim()
    .min_length(GENRE_NAME_MIN_LENGTH_UPDATE).escape(),
]

BOOK_FORM = [
    body("title", "Title must not be empty.").trim().min_length(1).escape(),
    body("author", "Author must not be empty.").trim().min_length(1).escape(),
    body("summary", "Summary must not be empty.").trim().min_length(1).escape(),
    body("isbn", "ISBN must not be empty").trim().min_length(1).escape(),
    body("genre").each().escape(),
]

BOOKINSTANCE_FORM = [
    body("book", "Book must be specified").trim().min_length(1).escape(),
    body("imprint", "Imprint must be specified").trim().min_length(1).escape(),
    body("status").escape(),
    body("due_back", "Invalid date").optional().iso_date(),
]


def validate_author(raw: Mapping[str, Any]) -> FormResult:
    return validate(AUTHOR_FORM, raw)


def validate_genre(raw: Mapping[str, Any], updating: bool = False) -> FormResult:
    return validate(GENRE_UPDATE_FORM if updating else GENRE_CREATE_FORM, raw)


def validate_book(raw: Mapping[str, Any]) -> FormResult:
    return validate(BOOK_FORM, raw)


def validate_bookinstance(raw: Mapping[str, Any]) -> FormResult:
    return validate(BOOKINSTANCE_FORM, raw)
