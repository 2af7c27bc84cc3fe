import asyncio
from typing import Awaitable, TypeVar

T = TypeVar("T")


def run_async(awaitable: Awaitable[T]) -> T:
    """Drive a store coroutine to completion from the Streamlit script thread."""
    async def _await() -> T:
        return await awaitable

    return asyncio.run(_await())
