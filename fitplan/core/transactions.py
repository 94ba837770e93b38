from contextlib import asynccontextmanager
from functools import wraps
from typing import AsyncIterator, Awaitable, Callable, ParamSpec, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

P = ParamSpec('P')
T = TypeVar('T')


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a block as one unit of work.

    Opens and commits a transaction when the session has none. Inside an
    already open transaction the block is flushed, and commit or rollback is
    left to whoever owns that transaction.
    """
    if not session.in_transaction():
        async with session.begin():
            yield session
        return

    yield session
    await session.flush()


def transactional(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        session = _extract_session(args, kwargs)

        async with atomic(session):
            return await func(*args, **kwargs)
    return wrapper


def _extract_session(args, kwargs) -> AsyncSession:
    if args and isinstance(args[0], AsyncSession):
        return args[0]
    if 'db' in kwargs:
        return kwargs['db']
    if 'session' in kwargs:
        return kwargs['session']
    if args and isinstance(getattr(args[0], '_session', None), AsyncSession):
        return args[0]._session
    raise ValueError("No session found in function arguments")
