import re
import uuid
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

SLUG_MAX_LENGTH = 50
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """URL-friendly slug: lower case, hyphen separated, at most 50 characters"""
    slug = _NON_ALNUM.sub("-", title.lower()).strip("-")

    if len(slug) > SLUG_MAX_LENGTH:
        slug = slug[:SLUG_MAX_LENGTH].rstrip("-")

    # Nothing alphanumeric in the title
    if not slug:
        return uuid.uuid4().hex[:8]

    return slug


async def generate_unique_slug(
    db: AsyncSession,
    model,
    title: str,
    exclude_id: Optional[int] = None
) -> str:
    """Slug unique within ``model.slug``, suffixed with -1, -2, ... on collision"""
    base_slug = generate_slug(title)
    slug = base_slug
    counter = 1

    while counter <= 1000:
        query = select(func.count()).select_from(model).where(model.slug == slug)
        if exclude_id is not None:
            query = query.where(model.id != exclude_id)

        result = await db.execute(query)
        if not result.scalar():
            return slug

        slug = f"{base_slug}-{counter}"
        counter += 1

    return uuid.uuid4().hex[:8]
