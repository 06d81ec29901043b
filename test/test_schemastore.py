"""Tests for the schema store."""

import json
import os
import sys
import tempfile
import unittest
from pathlib import Path

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsoncontract.schemastore import SchemaStore, SchemaStoreError


class TestSchemaStore(unittest.TestCase):
    """Test adding, looking up and loading schemas."""

    def test_add_and_get(self):
        store = SchemaStore()
        schema = {"type": "string"}
        self.assertEqual(store.add_schema("name", schema), "name")
        self.assertIs(store.get("name"), schema)
        self.assertIn("name", store)
        self.assertNotIn("other", store)

    def test_id_is_a_key(self):
        store = SchemaStore()
        schema = {"id": "http://example.com/person.json#", "type": "object"}
        store.add_schema("person", schema)
        self.assertIs(store.get("http://example.com/person.json"), schema)
        self.assertIs(store.get("http://example.com/person.json#"), schema)

    def test_missing_schema(self):
        with self.assertRaises(SchemaStoreError):
            SchemaStore().get("missing")

    def test_rejects_non_object(self):
        with self.assertRaises(TypeError):
            SchemaStore().add_schema("x", ["not", "a", "schema"])

    def test_remove_and_clear(self):
        store = SchemaStore()
        store.add_schema("a", {})
        store.add_schema("b", {})
        store.remove_schema("a")
        self.assertEqual(list(store), ["b"])
        store.clear()
        self.assertEqual(len(store), 0)

    def test_load_schemas(self):
        with tempfile.TemporaryDirectory() as tmp:
            Path(tmp, "nested").mkdir()
            Path(tmp, "a.json").write_text(json.dumps({"type": "string"}), encoding="utf-8")
            Path(tmp, "nested", "b.json").write_text(
                json.dumps({"id": "http://example.com/b.json", "type": "integer"}), encoding="utf-8")
            Path(tmp, "broken.json").write_text("{not json", encoding="utf-8")
            Path(tmp, "list.json").write_text("[1, 2]", encoding="utf-8")
            Path(tmp, "notes.txt").write_text("ignored", encoding="utf-8")

            store = SchemaStore()
            with self.assertLogs("jsoncontract.schemastore", level="WARNING") as logs:
                keys = store.load_schemas(tmp)
            self.assertEqual(len(logs.records), 2)

            a_uri = Path(tmp, "a.json").resolve().as_uri()
            b_uri = Path(tmp, "nested", "b.json").resolve().as_uri()
            self.assertEqual(sorted(keys), sorted([a_uri, b_uri, "http://example.com/b.json"]))
            self.assertEqual(store.get(a_uri), {"type": "string"})
            self.assertEqual(store.get("http://example.com/b.json")["type"], "integer")

    def test_load_single_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp, "s.json")
            path.write_text(json.dumps({"type": "null"}), encoding="utf-8")
            keys = SchemaStore().load_schemas(str(path))
            self.assertEqual(keys, [path.resolve().as_uri()])


if __name__ == '__main__':
    unittest.main()
