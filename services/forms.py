# services/forms.py: form body parsing, templates and re-render helpers
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from models import BOOKINSTANCE_STATUSES
from services.validation import FieldError

BASE_DIR = Path(__file__).resolve().parent.parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))
templates.env.globals["statuses"] = BOOKINSTANCE_STATUSES


@dataclass
class Choice:
    """An option in a checklist or dropdown, with the user's selection applied."""
    item: Any
    checked: bool = False

    @property
    def id(self) -> str:
        return self.item.id


async def read_form(request: Request) -> Dict[str, Any]:
    """Urlencoded body as a dict; a key sent more than once maps to a list of its values."""
    form = await request.form()
    data: Dict[str, Any] = {}
    for key in form.keys():
        values = form.getlist(key)
        data[key] = values if len(values) > 1 else values[0]
    return data


def mark_checked(items: Iterable[Any], selected_ids: Iterable[Any]) -> List[Choice]:
    selected = {str(i) for i in selected_ids}
    return [Choice(item, str(item.id) in selected) for item in items]


def render(request: Request, name: str, context: Dict[str, Any], status_code: int = 200):
    return templates.TemplateResponse(request, name, context, status_code=status_code)


def render_form(
    request: Request,
    name: str,
    title: str,
    errors: Optional[List[FieldError]] = None,
    **context: Any,
):
    """The form page: title, candidate entity, option lists and the ordered errors."""
    return render(request, name, {"title": title, "errors": errors or [], **context})
