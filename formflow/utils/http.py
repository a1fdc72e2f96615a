"""HTTP client helpers"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx


@asynccontextmanager
async def client_scope(
    client: Optional[httpx.AsyncClient],
    timeout: float
) -> AsyncIterator[httpx.AsyncClient]:
    """
    Yield the shared client when one was injected, otherwise a client that is
    opened and closed around this call
    """
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=timeout) as owned:
        yield owned
