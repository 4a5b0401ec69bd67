"""Controller response classes.

Each controller action returns one of these with its payload. Rendering is
decided per request: ajax calls (``X-Requested-With: XMLHttpRequest``) and
clients that do not prefer ``text/html`` get the payload as JSON; browsers get
the action's Jinja2 template rendered with the payload as context.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

if TYPE_CHECKING:
    from fastapi import Request
    from starlette.responses import Response

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def wants_json(request: Request) -> bool:
    """Return True for ajax requests and clients not asking for HTML."""
    if request.headers.get("x-requested-with", "").lower() == "xmlhttprequest":
        return True
    return "text/html" not in request.headers.get("accept", "")


class ResourceResponse:
    """Payload plus the template used for full-page rendering.

    Subclasses set ``view``; the template is ``<resource>/<view>.html``.
    A ``view`` of None means the action is JSON-only.
    """

    view: ClassVar[str | None] = None
    status_code: ClassVar[int] = 200

    def __init__(self, resource: str, payload: dict[str, Any]) -> None:
        self.resource = resource
        self.payload = payload

    @property
    def template_name(self) -> str | None:
        return f"{self.resource}/{self.view}.html" if self.view else None

    def render(self, request: Request) -> Response:
        if self.template_name is None or wants_json(request):
            return JSONResponse(jsonable_encoder(self.payload), status_code=self.status_code)
        return templates.TemplateResponse(
            request,
            self.template_name,
            context=self.payload,
            status_code=self.status_code,
        )


class IndexResponse(ResourceResponse):
    view = "index"


class CreateResponse(ResourceResponse):
    view = "create"


class StoreResponse(ResourceResponse):
    view = "rows"


class ShowResponse(ResourceResponse):
    view = "show"


class EditResponse(ResourceResponse):
    view = "edit"


class UpdateResponse(ResourceResponse):
    view = "rows"


class DestroyResponse(ResourceResponse):
    view = None


__all__ = [
    "CreateResponse",
    "DestroyResponse",
    "EditResponse",
    "IndexResponse",
    "ResourceResponse",
    "ShowResponse",
    "StoreResponse",
    "UpdateResponse",
    "templates",
    "wants_json",
]
