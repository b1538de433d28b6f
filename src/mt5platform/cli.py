"""Maintenance commands for the key-value store behind the API."""

import asyncio
from collections.abc import Callable, Coroutine
from typing import Annotated, Any

import typer

from mt5platform.config import Config
from mt5platform.core.core import create_store
from mt5platform.core.modules.account.models import ACCOUNTS_KEY, Account, Provider
from mt5platform.core.modules.user.models import USERS_KEY
from mt5platform.core.store import KeyValueStore
from mt5platform.errors import StoreUnavailableError
from mt5platform.logging import setup_logging

app = typer.Typer(add_completion=False, help="MT5 platform store maintenance (check, keys, clear, clean-accounts).")

PREVIEW_LENGTH = 100


async def _check(store: KeyValueStore) -> tuple[list[str], dict[str, str | None]]:
    """Ping, then return all keys and the contents of the two data blobs."""
    try:
        await store.ping()
        found = sorted(await store.list_keys("*"))
        blobs = {key: await store.get(key) for key in (USERS_KEY, ACCOUNTS_KEY)}
        return found, blobs
    finally:
        await store.close()


async def _list_keys(store: KeyValueStore, pattern: str) -> list[str]:
    try:
        return sorted(await store.list_keys(pattern))
    finally:
        await store.close()


async def _clear(store: KeyValueStore) -> tuple[int, int]:
    """Delete every key one by one; returns (deleted, remaining)."""
    try:
        keys = await store.list_keys("*")
        for key in keys:
            await store.delete(key)
            typer.echo(f"deleted {key}")
        remaining = await store.list_keys("*")
        return len(keys), len(remaining)
    finally:
        await store.close()


def _rejection_reason(entry: Any) -> str:
    if not isinstance(entry, dict):
        return "not an object"
    if "provider" not in entry:
        return "no provider field"
    if entry["provider"] not in [provider.value for provider in Provider]:
        return f'invalid provider "{entry["provider"]}"'
    return "invalid record"


async def _clean_accounts(store: KeyValueStore) -> tuple[list[Account], list[Any]] | None:
    """Rewrite the accounts blob without unreadable entries; None when there is no blob."""
    try:
        raw = await store.get(ACCOUNTS_KEY)
        if raw is None:
            return None
        kept, removed = Account.partition_list(raw)
        if removed:
            await store.set(ACCOUNTS_KEY, Account.dump_list(kept))
        return kept, removed
    finally:
        await store.close()


def _store() -> KeyValueStore:
    config = Config()
    setup_logging(config.debug)
    return create_store(config)


def _run(command: Callable[[KeyValueStore], Coroutine[Any, Any, Any]]) -> Any:
    try:
        return asyncio.run(command(_store()))
    except StoreUnavailableError as e:
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def check() -> None:
    """Ping the store and summarize what it holds."""
    found, blobs = _run(_check)
    typer.echo("store connected")
    typer.echo(f"{len(found)} key(s)")
    for key, value in blobs.items():
        if value is None:
            typer.echo(f"  {key}: not found")
        else:
            preview = value if len(value) <= PREVIEW_LENGTH else f"{value[:PREVIEW_LENGTH]}..."
            typer.echo(f"  {key}: {preview}")


@app.command()
def keys(pattern: Annotated[str, typer.Argument(help="Glob-style key pattern")] = "*") -> None:
    """List keys in the store."""
    found = _run(lambda store: _list_keys(store, pattern))
    for key in found:
        typer.echo(key)
    typer.echo(f"{len(found)} key(s)", err=True)


@app.command()
def clear(yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False) -> None:
    """Delete every key: users, accounts and all sessions."""
    if not yes:
        typer.confirm("Delete ALL keys from the store?", abort=True)
    deleted, remaining = _run(_clear)
    typer.echo(f"deleted {deleted} key(s), {remaining} remaining")
    if remaining:
        raise typer.Exit(code=1)


@app.command("clean-accounts")
def clean_accounts() -> None:
    """Drop stored accounts that cannot be read, such as ones with a missing or unknown provider."""
    result = _run(_clean_accounts)
    if result is None:
        typer.echo("no accounts stored")
        return
    kept, removed = result
    for entry in removed:
        number = entry.get("account_number") if isinstance(entry, dict) else None
        typer.echo(f"removed {number or '?'}: {_rejection_reason(entry)}")
    for account in kept:
        typer.echo(f"kept {account.account_number}: {account.provider}, {account.account_type}, balance {account.base_balance:g}")
    typer.echo(f"kept {len(kept)} account(s), removed {len(removed)}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
