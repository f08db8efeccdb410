import pytest

from changelog_api.models.status import StatusDefinition
from changelog_api.utils.slug import generate_slug, generate_unique_slug


@pytest.mark.parametrize("title, expected", [
    ("In Progress", "in-progress"),
    ("  Released!  ", "released"),
    ("v2.0 -- API", "v2-0-api"),
])
def test_generate_slug(title, expected):
    assert generate_slug(title) == expected


def test_generate_slug_truncates():
    slug = generate_slug("word " * 30)

    assert len(slug) <= 50
    assert not slug.endswith("-")


def test_generate_slug_without_alphanumerics():
    slug = generate_slug("!!!")

    assert len(slug) == 8


@pytest.mark.asyncio
async def test_unique_slug_skips_taken_values(db, board):
    assert await generate_unique_slug(db, StatusDefinition, "Proposed") == "proposed-1"
    assert await generate_unique_slug(db, StatusDefinition, "Proposed", exclude_id=board["Proposed"]) == "proposed"
    assert await generate_unique_slug(db, StatusDefinition, "Shipped") == "shipped"
