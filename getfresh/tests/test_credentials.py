"""
Unit tests for the persistent token buffer.

Tests verify:
- Empty store returns None.
- save_token / load_token round trip and overwrite.
- clear_token empties the slot only while it holds the given token.
- Empty tokens are refused.
- Token survives close/reopen (process restart).

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

from __future__ import annotations

from pathlib import Path

import pytest
from getfresh.src.credentials import CredentialStore


class TestTokenBuffer:
    """Basic buffer slot operations."""

    @pytest.mark.asyncio
    async def test_empty_store_has_no_token(self, tmp_path: Path) -> None:
        async with CredentialStore(tmp_path / "state.db") as store:
            assert await store.load_token() is None

    @pytest.mark.asyncio
    async def test_save_then_load(self, tmp_path: Path) -> None:
        async with CredentialStore(tmp_path / "state.db") as store:
            await store.save_token("tok-1")

            assert await store.load_token() == "tok-1"

    @pytest.mark.asyncio
    async def test_save_overwrites_previous_token(self, tmp_path: Path) -> None:
        async with CredentialStore(tmp_path / "state.db") as store:
            await store.save_token("tok-1")
            await store.save_token("tok-2")

            assert await store.load_token() == "tok-2"

    @pytest.mark.asyncio
    async def test_clear_token(self, tmp_path: Path) -> None:
        async with CredentialStore(tmp_path / "state.db") as store:
            await store.save_token("tok-1")

            assert await store.clear_token("tok-1") is True
            assert await store.load_token() is None
            # Clearing an empty slot is a no-op.
            assert await store.clear_token("tok-1") is False
            assert await store.load_token() is None

    @pytest.mark.asyncio
    async def test_clear_keeps_newer_token(self, tmp_path: Path) -> None:
        async with CredentialStore(tmp_path / "state.db") as store:
            await store.save_token("tok-2")

            assert await store.clear_token("tok-1") is False
            assert await store.load_token() == "tok-2"

    @pytest.mark.asyncio
    async def test_use_before_open_asserts(self, tmp_path: Path) -> None:
        store = CredentialStore(tmp_path / "state.db")

        with pytest.raises(AssertionError, match="not opened"):
            await store.load_token()

    @pytest.mark.asyncio
    async def test_empty_token_refused(self, tmp_path: Path) -> None:
        async with CredentialStore(tmp_path / "state.db") as store:
            with pytest.raises(ValueError):
                await store.save_token("")

            assert await store.load_token() is None


class TestTokenPersistence:
    """The cached token survives process restarts."""

    @pytest.mark.asyncio
    async def test_token_survives_reopen(self, tmp_path: Path) -> None:
        db_path = tmp_path / "state.db"

        async with CredentialStore(db_path) as store:
            await store.save_token("persistent-token")

        async with CredentialStore(db_path) as store:
            assert await store.load_token() == "persistent-token"

    @pytest.mark.asyncio
    async def test_creates_db_file(self, tmp_path: Path) -> None:
        db_path = tmp_path / "state.db"
        store = CredentialStore(path=db_path)
        await store.open()

        assert db_path.exists()
        await store.close()
