from typing import Awaitable, Callable

from slugify import slugify


async def generate_unique_slug(
        value: str,
        exists: Callable[[str], Awaitable[bool]],
        fallback: str = "user",
) -> str:
    """
    Slugify ``value`` and append ``-1``, ``-2``... until ``exists`` says the
    slug is free.

    Args:
        value: Text the slug is derived from
        exists: Async predicate telling whether a slug is already used
        fallback: Base used when ``value`` has no sluggable characters

    Returns:
        A slug not yet taken
    """
    base = slugify(value) or fallback
    slug = base
    counter = 1
    while await exists(slug):
        slug = f"{base}-{counter}"
        counter += 1
    return slug
