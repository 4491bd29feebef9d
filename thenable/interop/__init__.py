"""Bridges between thenable futures and other async runtimes"""

from .asyncio_bridge import to_asyncio, from_asyncio

__all__ = ["to_asyncio", "from_asyncio"]
