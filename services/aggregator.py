# services/aggregator.py: run independent reads in parallel, join by name
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

from sqlalchemy.ext.asyncio import AsyncSession

from database import Store

logger = logging.getLogger("catalog.aggregator")

Operation = Callable[[AsyncSession], Awaitable[Any]]


async def _run(store: Store, operation: Operation) -> Any:
    # An AsyncSession is not safe for concurrent use, so each read gets its own.
    async with store.session() as db:
        return await operation(db)


async def gather_named(store: Store, **operations: Operation) -> Dict[str, Any]:
    """
    Run every operation concurrently and return {name: result}.

    All operations are scheduled before any is awaited. The first failure
    cancels the ones still running and is re-raised as is.
    """
    tasks = {name: asyncio.ensure_future(_run(store, op)) for name, op in operations.items()}
    try:
        await asyncio.gather(*tasks.values())
    except BaseException:
        for task in tasks.values():
            task.cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        raise
    return {name: task.result() for name, task in tasks.items()}
