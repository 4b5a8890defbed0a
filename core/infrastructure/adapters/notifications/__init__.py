"""Ops alert adapters.

Import concrete services from their modules; the Telegram adapter pulls in
aiohttp.
"""

__all__ = []
