"""
Delete protection.

An Author or Genre may only be removed once no Book points at it, and a Book
only once it has no copies (BookInstances). The guard fetches the target and
its dependents together and only deletes when the dependents list is empty;
otherwise the caller shows the blocking records instead.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from crud.author import delete_author, get_author, get_author_books
from crud.book import delete_book, get_book, get_book_instances
from crud.genre import delete_genre, get_genre, get_genre_books
from database import Store
from services.aggregator import gather_named

logger = logging.getLogger("catalog.guard")


@dataclass(frozen=True)
class Dependency:
    get_target: Callable[[AsyncSession, str], Awaitable[Any]]
    get_dependents: Callable[[AsyncSession, str], Awaitable[List[Any]]]
    remove: Callable[[AsyncSession, str], Awaitable[None]]


GUARDED = {
    "author": Dependency(get_author, get_author_books, delete_author),
    "genre": Dependency(get_genre, get_genre_books, delete_genre),
    "book": Dependency(get_book, get_book_instances, delete_book),
}


@dataclass
class DeleteCheck:
    target: Optional[Any]
    dependents: List[Any] = field(default_factory=list)

    @property
    def exists(self) -> bool:
        return self.target is not None

    @property
    def blocked(self) -> bool:
        return bool(self.dependents)


async def check_delete(store: Store, kind: str, target_id: str) -> DeleteCheck:
    dependency = GUARDED[kind]
    results: Dict[str, Any] = await gather_named(
        store,
        target=lambda db: dependency.get_target(db, target_id),
        dependents=lambda db: dependency.get_dependents(db, target_id),
    )
    return DeleteCheck(results["target"], list(results["dependents"]))


async def delete_if_unreferenced(store: Store, kind: str, target_id: str) -> DeleteCheck:
    """Re-resolve target and dependents, then delete only when nothing depends on it."""
    check = await check_delete(store, kind, target_id)
    if check.blocked:
        logger.info("delete of %s %s blocked by %d dependents", kind, target_id, len(check.dependents))
        return check
    async with store.session() as db:
        await GUARDED[kind].remove(db, target_id)
    logger.info("deleted %s %s", kind, target_id)
    return check
