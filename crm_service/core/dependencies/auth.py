"""Actor resolution dependency.

Authentication is performed by the upstream gateway, which forwards the user
as headers (names configurable through AUTH_*):

    X-User-Id: 42
    X-User-Role: team
    X-User-Acl: crm.reminders.create,crm.tasks.*.delete

With AUTH_MOCK_ENABLED=true a configured persona is used when the headers
are absent.

Usage:
    @router.get("/reminders")
    async def index(actor: Annotated[Actor, Depends(get_current_actor)]):
        ...
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from pydantic import ValidationError

from crm_service.core.exceptions import UnauthorizedException
from crm_service.core.schemas.auth import Actor
from crm_service.core.settings import AuthSettings, get_auth_settings
from crm_service.infra.logging import set_log_context

logger = logging.getLogger(__name__)


def _split_acl(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


async def get_current_actor(
    request: Request,
    settings: Annotated[AuthSettings, Depends(get_auth_settings)],
) -> Actor:
    """Resolve the actor from gateway headers or the mock persona.

    Raises:
        UnauthorizedException: If no actor can be resolved.
    """
    user_id = request.headers.get(settings.user_id_header)

    if user_id:
        try:
            actor = Actor(
                user_id=user_id,
                role=request.headers.get(settings.role_header) or "team",
                acl=_split_acl(request.headers.get(settings.acl_header)),
                language=request.headers.get(settings.language_header),
            )
        except ValidationError as exc:
            logger.warning(
                "Rejected malformed actor headers",
                extra={"errors": exc.errors(include_url=False), "path": request.url.path},
            )
            raise UnauthorizedException(detail="Invalid user headers") from exc
    elif settings.mock_enabled:
        actor = Actor(**settings.get_mock_user_config())
    else:
        raise UnauthorizedException()

    request.state.actor = actor
    set_log_context(user_id=actor.user_id)
    return actor


ActorDep = Annotated[Actor, Depends(get_current_actor)]

__all__ = ["ActorDep", "get_current_actor"]
