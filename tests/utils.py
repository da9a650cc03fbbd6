"""Test utilities for short-link tests."""

import random
import string
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import func, select

from shortlinks.models.shortlink import ShortLink, utc_now

TEST_BASE_URL = "http://foo"
TEST_SALT = "RAnD0mVuFindSa!t"


def random_string(length: int = 10) -> str:
    """Generate a random alphanumeric string."""
    return ''.join(random.choice(string.ascii_letters + string.digits) for _ in range(length))


def random_path() -> str:
    """Generate a random site path for testing."""
    return f"/Record/{random_string(8)}?lookfor={random_string(5)}"


async def create_test_shortlink(
    db,
    path: Optional[str] = None,
    hash: Optional[str] = None,
    created: Optional[datetime] = None,
    commit: bool = True
) -> ShortLink:
    """Create and persist a test ShortLink in the database."""
    link = ShortLink(
        path=path or random_path(),
        hash=hash if hash is not None else random_string(9),
        created=created or utc_now(),
    )
    db.add(link)
    await db.flush()
    await db.refresh(link)
    if commit:
        await db.commit()
    return link


async def count_shortlinks(db) -> int:
    """Count stored rows."""
    result = await db.execute(select(func.count()).select_from(ShortLink))
    return result.scalar_one()


async def all_shortlinks(db):
    """Fetch every stored row, freshly loaded, in insertion order."""
    result = await db.execute(
        select(ShortLink).order_by(ShortLink.id).execution_options(populate_existing=True)
    )
    return list(result.scalars().all())


def as_utc(value: datetime) -> datetime:
    """Normalize a stored timestamp to aware UTC; SQLite hands back naive values."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
