"""CLI helpers: running async commands and formatted output."""

import asyncio
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

import click


def coro[T](f: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """Decorator that makes an async function synchronous for Click.

    Usage:
        @db.command()
        @coro
        async def init():
            await create_tables()
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def success(message: str) -> None:
    click.secho(f"✓ {message}", fg="green")


def error(message: str) -> None:
    click.secho(f"✗ {message}", fg="red", err=True)


def info(message: str) -> None:
    click.secho(f"ℹ {message}", fg="blue")
