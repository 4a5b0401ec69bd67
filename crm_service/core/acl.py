"""ACL pattern evaluation.

Grant patterns use dot segments, e.g. ``crm.reminders.12.edit-delete``:
    - '*' matches exactly one segment
    - '#' matches any number of segments
    - '!' prefix turns a pattern into an explicit deny; denies always win
    - 'me' matches the actor's own user id

Evaluation is local and cached; no network calls.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from crm_service.core.schemas.auth import Actor

__all__ = ["ACLChecker", "AccessCheck", "get_cached_access_check"]


@lru_cache(maxsize=2048)
def _compile_acl_pattern(access: str, auth_id: str) -> re.Pattern[str]:
    """Compile one ACL pattern into an anchored regex."""
    regex = re.escape(access).replace("\\*", "[^.#]*?").replace("\\#", ".*?")
    pieces = [f"(me|{re.escape(auth_id)})" if piece == "me" else piece for piece in regex.split("\\.")]
    return re.compile("^" + "\\.".join(pieces) + "$")


class AccessCheck:
    """ACL pattern matcher with wildcard and negation support.

    Matching rules:
    1. Negation patterns (starting with '!') are checked first
    2. If any negation matches, access is DENIED
    3. If any positive pattern matches, access is GRANTED
    4. If nothing matches, access is DENIED

    Example:
        >>> checker = AccessCheck("7", ["crm.tasks.*.delete", "!crm.tasks.3.delete"])
        >>> checker.matches_required_access("crm.tasks.9.delete")
        True
        >>> checker.matches_required_access("crm.tasks.3.delete")
        False
    """

    def __init__(self, auth_id: str | None, acl: Iterable[str]) -> None:
        self.auth_id = auth_id or ""
        entries = list(acl)
        self._positive = [
            _compile_acl_pattern(entry, self.auth_id) for entry in entries if not entry.startswith("!")
        ]
        self._negative = [
            _compile_acl_pattern(entry[1:], self.auth_id) for entry in entries if entry.startswith("!")
        ]

    def is_denied(self, required_access: str) -> bool:
        """Return True if an explicit negation covers ``required_access``."""
        return any(pattern.match(required_access) for pattern in self._negative)

    def matches_required_access(self, required_access: str | None) -> bool:
        """Check if the required access matches any granted ACL.

        None means no access is required and is always granted.
        """
        if required_access is None:
            return True
        if self.is_denied(required_access):
            return False
        return any(pattern.match(required_access) for pattern in self._positive)


@lru_cache(maxsize=512)
def _get_cached_access_check(auth_id: str, acl_tuple: tuple[str, ...]) -> AccessCheck:
    return AccessCheck(auth_id, acl_tuple)


def get_cached_access_check(auth_id: str | None, acl: Iterable[str]) -> AccessCheck:
    """Return a cached AccessCheck for this actor id and grant list."""
    return _get_cached_access_check(auth_id or "", tuple(acl))


class ACLChecker:
    """ACL checks for one actor, used by the resource permission checkers.

    Example:
        checker = ACLChecker(actor)
        if checker.has_any_acl(f"crm.tasks.{task.id}.delete", "crm.tasks.#"):
            ...
    """

    def __init__(self, actor: Actor) -> None:
        self.actor = actor
        self._checker = get_cached_access_check(str(actor.user_id), actor.acl)

    def has_acl(self, pattern: str) -> bool:
        return self._checker.matches_required_access(pattern)

    def has_any_acl(self, *patterns: str) -> bool:
        return any(self.has_acl(pattern) for pattern in patterns)

    def is_denied(self, pattern: str) -> bool:
        return self._checker.is_denied(pattern)
