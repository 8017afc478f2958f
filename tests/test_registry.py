#!/usr/bin/env python3
"""
Unit tests for the connection registry.

Covers name uniqueness, renames, release on deregister, the lurker count and
behaviour under concurrent callers.
"""

import asyncio
import unittest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from fakes import make_connection
from yochat.server.chat.errors import InvalidName, NameTaken, TransportClosed
from yochat.server.chat.registry import ConnectionRegistry


class TestConnectionRegistry(unittest.IsolatedAsyncioTestCase):
    """Test cases for ConnectionRegistry."""

    async def asyncSetUp(self):
        self.registry = ConnectionRegistry()
        self.c1 = make_connection(1)
        self.c2 = make_connection(2)
        await self.registry.register(self.c1)
        await self.registry.register(self.c2)

    async def test_register_starts_anonymous(self):
        self.assertEqual(await self.registry.count(), 2)
        self.assertEqual(await self.registry.named_count(), 0)
        self.assertEqual(await self.registry.lurker_count(), 2)
        self.assertIsNone(await self.registry.identity_of(self.c1))

    async def test_first_naming(self):
        change = await self.registry.set_identity(self.c1, "alice")

        self.assertIsNone(change.old)
        self.assertEqual(change.new, "alice")
        self.assertTrue(change.is_first)
        self.assertFalse(change.is_rename)
        self.assertEqual(await self.registry.all_names(), ["alice"])
        self.assertEqual(await self.registry.lurker_count(), 1)

    async def test_name_is_stripped(self):
        change = await self.registry.set_identity(self.c1, "  alice \t")
        self.assertEqual(change.new, "alice")
        self.assertEqual(await self.registry.identity_of(self.c1), "alice")

    async def test_blank_name_is_invalid(self):
        for name in ("", "   ", "\t"):
            with self.assertRaises(InvalidName):
                await self.registry.set_identity(self.c1, name)
        self.assertEqual(await self.registry.all_names(), [])

    async def test_duplicate_name_is_taken_without_state_change(self):
        await self.registry.set_identity(self.c1, "alice")
        await self.registry.set_identity(self.c2, "bob")

        with self.assertRaises(NameTaken):
            await self.registry.set_identity(self.c2, "alice")

        self.assertEqual(await self.registry.identity_of(self.c2), "bob")
        self.assertEqual(sorted(await self.registry.all_names()), ["alice", "bob"])

    async def test_names_are_case_sensitive(self):
        await self.registry.set_identity(self.c1, "alice")
        change = await self.registry.set_identity(self.c2, "Alice")
        self.assertEqual(change.new, "Alice")

    async def test_rename_preserves_counts(self):
        await self.registry.set_identity(self.c1, "A")
        count = await self.registry.count()
        named = await self.registry.named_count()

        change = await self.registry.set_identity(self.c1, "B")

        self.assertEqual(change.old, "A")
        self.assertTrue(change.is_rename)
        names = await self.registry.all_names()
        self.assertNotIn("A", names)
        self.assertIn("B", names)
        self.assertEqual(await self.registry.count(), count)
        self.assertEqual(await self.registry.named_count(), named)

    async def test_renamed_away_name_is_free(self):
        await self.registry.set_identity(self.c1, "A")
        await self.registry.set_identity(self.c1, "B")
        change = await self.registry.set_identity(self.c2, "A")
        self.assertEqual(change.new, "A")

    async def test_same_name_again_is_not_a_rename(self):
        await self.registry.set_identity(self.c1, "alice")
        change = await self.registry.set_identity(self.c1, "alice")

        self.assertFalse(change.is_first)
        self.assertFalse(change.is_rename)
        self.assertEqual(await self.registry.all_names(), ["alice"])

    async def test_deregister_releases_name(self):
        await self.registry.set_identity(self.c1, "alice")

        released = await self.registry.deregister(self.c1)

        self.assertEqual(released, "alice")
        self.assertEqual(await self.registry.count(), 1)
        change = await self.registry.set_identity(self.c2, "alice")
        self.assertEqual(change.new, "alice")

    async def test_double_deregister_is_harmless(self):
        await self.registry.set_identity(self.c1, "alice")
        await self.registry.deregister(self.c1)
        await self.registry.set_identity(self.c2, "alice")

        self.assertIsNone(await self.registry.deregister(self.c1))

        # c2's claim on the name survives the second call
        self.assertEqual(await self.registry.all_names(), ["alice"])
        self.assertEqual(await self.registry.identity_of(self.c2), "alice")

    async def test_deregister_unknown_connection(self):
        self.assertIsNone(await self.registry.deregister(make_connection(99)))
        self.assertEqual(await self.registry.count(), 2)

    async def test_set_identity_on_unregistered_connection(self):
        with self.assertRaises(TransportClosed):
            await self.registry.set_identity(make_connection(99), "ghost")

    async def test_placeholder_identity_is_display_only(self):
        display = await self.registry.lookup_identity(self.c1)

        self.assertEqual(display, self.c1.peername)
        self.assertEqual(await self.registry.all_names(), [])
        # the placeholder does not block anyone from using it as a real name
        change = await self.registry.set_identity(self.c2, display)
        self.assertEqual(change.new, display)

    async def test_snapshots(self):
        await self.registry.set_identity(self.c1, "alice")

        self.assertEqual(await self.registry.all_connections(), [self.c1, self.c2])
        self.assertEqual(await self.registry.others(self.c1), [self.c2])
        self.assertEqual(await self.registry.lurkers(), [self.c2])

    async def test_connections_compare_by_uid(self):
        self.assertEqual(self.c1, make_connection(1))
        self.assertIn(make_connection(2), await self.registry.all_connections())


class TestConnectionRegistryConcurrency(unittest.IsolatedAsyncioTestCase):
    """Concurrent callers never break the registry invariants."""

    async def test_only_one_claim_wins(self):
        registry = ConnectionRegistry()
        connections = [make_connection(uid) for uid in range(1, 51)]
        for connection in connections:
            await registry.register(connection)

        results = await asyncio.gather(
            *[registry.set_identity(c, "alice") for c in connections],
            return_exceptions=True
        )

        winners = [r for r in results if not isinstance(r, Exception)]
        losers = [r for r in results if isinstance(r, NameTaken)]
        self.assertEqual(len(winners), 1)
        self.assertEqual(len(losers), 49)
        self.assertEqual(await registry.all_names(), ["alice"])

    async def test_lurker_count_under_mixed_operations(self):
        registry = ConnectionRegistry()
        connections = [make_connection(uid) for uid in range(1, 41)]

        async def lifecycle(connection):
            await registry.register(connection)
            await asyncio.sleep(0)
            if connection.uid % 2 == 0:
                await registry.set_identity(connection, f"user{connection.uid}")
                await asyncio.sleep(0)
                await registry.set_identity(connection, f"renamed{connection.uid}")
            if connection.uid % 5 == 0:
                await registry.deregister(connection)

        await asyncio.gather(*[lifecycle(c) for c in connections])

        live = await registry.all_connections()
        anonymous = [c for c in live if await registry.identity_of(c) is None]
        self.assertEqual(await registry.lurker_count(), len(anonymous))
        self.assertEqual(await registry.count() - await registry.named_count(), len(anonymous))
        names = await registry.all_names()
        self.assertEqual(len(names), len(set(names)))
        self.assertTrue(all(name.startswith("renamed") for name in names))


if __name__ == '__main__':
    unittest.main()
