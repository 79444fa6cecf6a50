from pathlib import Path
from typing import Any, Dict

from fastapi.templating import Jinja2Templates
from starlette.requests import Request


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def _render(name: str, context: Dict[str, Any]) -> str:
    request = context.get("request")
    if request is None:
        request = Request(scope={"type": "http"})
    template = templates.get_template(name)
    return template.render({**context, "request": request})


def render_calendar_html(context: Dict[str, Any]) -> str:
    return _render("calendar.html", context)


def render_meetings_html(context: Dict[str, Any]) -> str:
    return _render("meetings.html", context)


def render_summary_html(context: Dict[str, Any]) -> str:
    return _render("summary.html", context)
