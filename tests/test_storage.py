# -*- coding: utf-8 -*-

from __future__ import annotations

import shutil
import tempfile
import unittest
from pathlib import Path

from healthpanda.storage import (
    PROFILE_KEY,
    TOKEN_KEY,
    MemoryKeyValueStore,
    SQLiteKeyValueStore,
    TokenCredentials,
)


class TestSQLiteKeyValueStore(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = Path(tempfile.mkdtemp(prefix="healthpanda-test-"))
        self.db_path = self._tmp / "nested" / "storage.db"

    def tearDown(self) -> None:
        shutil.rmtree(self._tmp, ignore_errors=True)

    def test_values_survive_a_new_instance(self) -> None:
        store = SQLiteKeyValueStore(self.db_path)
        store.set(TOKEN_KEY, "tok1")
        self.assertTrue(self.db_path.exists())

        reopened = SQLiteKeyValueStore(self.db_path)
        self.assertEqual(reopened.get(TOKEN_KEY), "tok1")

    def test_last_writer_wins_and_delete(self) -> None:
        store = SQLiteKeyValueStore(self.db_path)
        store.set(TOKEN_KEY, "tok1")
        store.set(TOKEN_KEY, "tok2")
        self.assertEqual(store.get(TOKEN_KEY), "tok2")

        store.delete(TOKEN_KEY, "missing")
        self.assertIsNone(store.get(TOKEN_KEY))


class TestTokenCredentials(unittest.TestCase):
    def test_clear_removes_token_and_profile(self) -> None:
        store = MemoryKeyValueStore({PROFILE_KEY: '{"weight": 70}'})
        creds = TokenCredentials(store)
        creds.save_token("tok1")
        self.assertEqual(creds.get_token(), "tok1")

        creds.clear()
        self.assertIsNone(creds.get_token())
        self.assertIsNone(store.get(PROFILE_KEY))

    def test_empty_token_reads_as_missing(self) -> None:
        creds = TokenCredentials(MemoryKeyValueStore({TOKEN_KEY: ""}))
        self.assertIsNone(creds.get_token())


if __name__ == "__main__":
    unittest.main()
