"""Repository for the tags feature."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import SQLAlchemyError

from crm_service.core.database.exceptions import RepositoryError
from crm_service.core.database.repository import BaseRepository
from crm_service.features.tags.models import Tag

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from crm_service.core.schemas.auth import Actor


def clean_titles(titles: Iterable[str] | None) -> list[str]:
    """Trim titles, drop blanks and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for title in titles or ():
        text = str(title).strip()
        if text:
            seen.setdefault(text, None)
    return list(seen)


class TagRepository(BaseRepository[Tag]):
    """Repository for Tag rows keyed by resource type and id.

    Feature-specific methods:
        - get_by_type(session, resource_type, actor) -> vocabulary titles
        - get_by_resource(session, resource_type, resource_id) -> tags
        - add(session, resource_type, resource_id, titles, creator_id)
        - delete_for_resource(session, resource_type, resource_id)
    """

    def __init__(self) -> None:
        super().__init__(Tag)

    async def get_by_type(
        self,
        session: AsyncSession,
        resource_type: str,
        actor: Actor,
    ) -> list[str]:
        """Distinct tag titles for a resource type visible to ``actor``.

        Public tags plus the actor's own, sorted alphabetically.
        """
        stmt = (
            select(Tag.title)
            .where(Tag.resource_type == resource_type)
            .where(or_(Tag.visibility == "public", Tag.creator_id == actor.user_id))
            .distinct()
            .order_by(Tag.title)
        )
        titles = list((await session.execute(stmt)).scalars().all())
        self._lazy.debug(lambda: f"db.get_by_type({resource_type!r}) -> {len(titles)} titles")
        return titles

    async def get_by_resource(
        self,
        session: AsyncSession,
        resource_type: str,
        resource_id: int,
    ) -> Sequence[Tag]:
        """Tags attached to one resource instance, in insertion order."""
        stmt = (
            select(Tag)
            .where(Tag.resource_type == resource_type, Tag.resource_id == resource_id)
            .order_by(Tag.id)
        )
        return (await session.execute(stmt)).scalars().all()

    async def add(
        self,
        session: AsyncSession,
        resource_type: str,
        resource_id: int,
        titles: Iterable[str] | None,
        creator_id: int | None,
    ) -> list[Tag]:
        """Attach tags to a resource; blank and repeated titles are skipped."""
        tags = [
            Tag(
                title=title,
                resource_type=resource_type,
                resource_id=resource_id,
                creator_id=creator_id,
                visibility="user",
            )
            for title in clean_titles(titles)
        ]
        for tag in tags:
            await self.create(session, tag)
        self._lazy.debug(
            lambda: f"db.add_tags: {resource_type}#{resource_id} -> {[tag.title for tag in tags]}"
        )
        return tags

    async def delete_for_resource(
        self,
        session: AsyncSession,
        resource_type: str,
        resource_id: int | Iterable[int],
    ) -> int:
        """Delete every tag of one or more resource instances; returns rows deleted."""
        ids = [resource_id] if isinstance(resource_id, int) else list(resource_id)
        stmt = delete(Tag).where(Tag.resource_type == resource_type, Tag.resource_id.in_(ids))
        try:
            result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            raise RepositoryError("Failed to delete tags", {"resource_type": resource_type}) from exc
        self._lazy.debug(lambda: f"db.delete_tags: {resource_type}#{ids} -> {result.rowcount} rows")
        return result.rowcount


_tag_repository: TagRepository | None = None


def get_tag_repository() -> TagRepository:
    """Get the TagRepository singleton.

    Usage in FastAPI routes:
        repo: Annotated[TagRepository, Depends(get_tag_repository)]
    """
    global _tag_repository
    if _tag_repository is None:
        _tag_repository = TagRepository()
    return _tag_repository
