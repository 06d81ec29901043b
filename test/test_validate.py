"""Tests for the public validation interface and the validate command."""

import contextlib
import io
import json
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsoncomparison import NO_DIFF, Compare

import jsoncontract
from jsoncontract.errors import ValidationFailed
from jsoncontract.jsoncontract import main
from jsoncontract.schemastore import SchemaStore
from jsoncontract.validate import (ValidationResult, add_schema, default_store, validate, validate_file,
                                   validate_instance, validate_json_instances, validate_with_schema)

PERSON_SCHEMA = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1, "required": True},
        "age": {"type": "integer", "minimum": 0},
        "tags": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
    },
    "additionalProperties": False,
}


class TestValidateApi(unittest.TestCase):
    """Test validation against stored schemas and schema objects."""

    def tearDown(self):
        default_store().clear()

    def test_validate_stored_schema(self):
        add_schema("person", PERSON_SCHEMA)
        data = {"name": "Alice", "age": 30}
        self.assertIs(validate("person", data), data)
        with self.assertRaises(ValidationFailed) as ctx:
            validate("person", {"name": "Alice", "age": -1})
        self.assertEqual(ctx.exception.errors[0].path, ["age"])

    def test_validate_with_explicit_base_uri(self):
        store = SchemaStore()
        store.add_schema("http://example.com/schemas/name.json", {"type": "string"})
        store.add_schema("person", {"properties": {"name": {"$ref": "name.json"}}})
        options = {"store": store, "base_uri": "http://example.com/schemas/person.json"}
        self.assertEqual(validate("person", {"name": "x"}, **options), {"name": "x"})
        with self.assertRaises(ValidationFailed) as ctx:
            validate("person", {"name": 1}, **options)
        self.assertEqual(ctx.exception.errors[0].error, "wrong_type")

    def test_validate_unknown_schema(self):
        with self.assertRaises(ValidationFailed) as ctx:
            validate("nobody", {})
        self.assertEqual(ctx.exception.errors[0].error, "schema_not_found")

    def test_validate_with_explicit_store(self):
        store = SchemaStore()
        store.add_schema("flag", {"type": "boolean"})
        self.assertTrue(validate("flag", True, store=store))
        with self.assertRaises(ValidationFailed):
            validate("flag", True)

    def test_validate_with_schema(self):
        self.assertEqual(validate_with_schema({"type": "string"}, "x"), "x")
        with self.assertRaises(ValidationFailed):
            validate_with_schema({"type": "string"}, 1)

    def test_validate_json_text(self):
        data = validate_with_schema('{"type": "array", "maxItems": 2}', '[1, 2]', parse_json=True)
        self.assertEqual(data, [1, 2])
        with self.assertRaises(json.JSONDecodeError):
            validate_with_schema({"type": "array"}, '[1,', parse_json=True)

    def test_allowed_errors(self):
        value = {"name": "", "age": "x", "tags": ["a", "a"], "extra": 1}
        with self.assertRaises(ValidationFailed) as ctx:
            validate_with_schema(PERSON_SCHEMA, value, allowed_errors="infinity")
        self.assertEqual(sorted(e.error for e in ctx.exception.errors),
                         ["no_extra_properties_allowed", "not_unique", "wrong_length", "wrong_type"])
        with self.assertRaises(ValidationFailed) as ctx:
            validate_with_schema(PERSON_SCHEMA, value, allowed_errors=1)
        self.assertEqual(len(ctx.exception.errors), 2)

    def test_package_exports(self):
        self.assertIs(jsoncontract.validate_with_schema, validate_with_schema)
        self.assertIs(jsoncontract.ValidationFailed, ValidationFailed)
        self.assertTrue(jsoncontract.is_equal({"a": [1]}, {"a": [1.0]}))


class TestValidationResult(unittest.TestCase):
    """Test the non-raising result form."""

    def test_valid(self):
        result = validate_instance({"name": "Bob"}, PERSON_SCHEMA)
        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, [])
        self.assertEqual(str(result), "✓ Valid")

    def test_invalid(self):
        result = validate_instance({"age": 3}, PERSON_SCHEMA)
        self.assertFalse(result.is_valid)
        self.assertEqual([e.error for e in result.errors], ["missing_required_property"])
        self.assertIn("name", str(result))

    def test_to_dict(self):
        result = validate_instance({"name": "Bob", "nick": "B"}, PERSON_SCHEMA)
        result.instance_path = "people.json"
        expected = {
            "instance": "people.json",
            "valid": False,
            "errors": [{
                "kind": "data_invalid",
                "error": "no_extra_properties_allowed",
                "path": "#/nick",
                "detail": "nick",
                "value": {"name": "Bob", "nick": "B"},
            }],
        }
        diff = Compare().check(expected, result.to_dict())
        assert diff == NO_DIFF

    def test_repr(self):
        self.assertEqual(repr(ValidationResult(True)), "ValidationResult(is_valid=True, errors=[])")


class TestValidateFile(unittest.TestCase):
    """Test file-based validation."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.schema_path = os.path.join(self.tmp.name, "person.json")
        with open(self.schema_path, "w", encoding="utf-8") as f:
            json.dump(PERSON_SCHEMA, f)

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_validate_json_array(self):
        """Each element of a JSON array is an instance."""
        path = self.write("people.json", json.dumps([{"name": "A"}, {"name": "B", "age": 1.5}]))
        results = validate_file(path, self.schema_path)
        self.assertEqual([r.is_valid for r in results], [True, False])
        self.assertEqual(results[1].instance_path, f"{path}[1]")

    def test_validate_array_schema_takes_whole_document(self):
        schema_path = self.write("list.schema.json", json.dumps({"type": "array", "minItems": 3}))
        path = self.write("list.json", "[1, 2]")
        results = validate_file(path, schema_path)
        self.assertEqual(len(results), 1)
        self.assertEqual([e.error for e in results[0].errors], ["wrong_size"])

    def test_validate_jsonl(self):
        """Each line of a JSON Lines file is an instance."""
        path = self.write("people.jsonl", '{"name": "A"}\n\n{"name": 1}\n{"name": "C"}\n')
        results = validate_file(path, self.schema_path)
        self.assertEqual([r.is_valid for r in results], [True, False, True])
        self.assertEqual(results[1].instance_path, f"{path}:3")

    def test_validate_jsonl_with_broken_line(self):
        path = self.write("people.jsonl", '{"name": "A"}\n{"name": \n')
        with self.assertLogs("jsoncontract.validate", level="WARNING"):
            results = validate_file(path, self.schema_path)
        invalid = [r for r in results if not r.is_valid]
        self.assertEqual(len(results), 2)
        self.assertEqual([e.error for e in invalid[0].errors], ["invalid_json"])

    def test_all_errors(self):
        path = self.write("bad.json", json.dumps({"name": 1, "age": -1}))
        self.assertEqual(len(validate_file(path, self.schema_path)[0].errors), 1)
        self.assertEqual(len(validate_file(path, self.schema_path, all_errors=True)[0].errors), 2)

    def test_relative_ref_next_to_schema(self):
        self.write("defs.json", json.dumps({"definitions": {"id": {"type": "integer"}}}))
        schema_path = self.write("main.json", json.dumps({"items": {"$ref": "defs.json#/definitions/id"}}))
        path = self.write("ids.json", json.dumps([[1, 2], [3, "x"]]))
        results = validate_file(path, schema_path)
        self.assertEqual([r.is_valid for r in results], [True, False])

    def test_validate_json_instances(self):
        good = self.write("good.json", json.dumps({"name": "A"}))
        bad = self.write("bad.json", json.dumps({"name": ""}))
        valid, invalid, results = validate_json_instances([good, bad], self.schema_path)
        self.assertEqual((valid, invalid, len(results)), (1, 1, 2))


class TestValidateCommand(unittest.TestCase):
    """Test the command line."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.schema_path = os.path.join(self.tmp.name, "person.json")
        with open(self.schema_path, "w", encoding="utf-8") as f:
            json.dump(PERSON_SCHEMA, f)

    def tearDown(self):
        self.tmp.cleanup()

    def run_main(self, *argv):
        out = io.StringIO()
        with patch.object(sys, "argv", ["jsoncontract", *argv]), contextlib.redirect_stdout(out):
            main()
        return out.getvalue()

    def write_instance(self, name, value):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(value, f)
        return path

    def test_valid_instance(self):
        path = self.write_instance("a.json", {"name": "A"})
        output = self.run_main("validate", path, "--schema", self.schema_path)
        self.assertIn("Validation summary: 1/1 instances valid", output)

    def test_invalid_instance_exits_with_1(self):
        path = self.write_instance("a.json", {"name": "A", "age": "old"})
        with self.assertRaises(SystemExit) as ctx:
            self.run_main("validate", path, "--schema", self.schema_path, "--quiet")
        self.assertEqual(ctx.exception.code, 1)

    def test_json_report(self):
        path = self.write_instance("a.json", {"age": -1})
        out = io.StringIO()
        argv = ["jsoncontract", "validate", path, "--schema", self.schema_path, "--json", "--all-errors"]
        with patch.object(sys, "argv", argv), contextlib.redirect_stdout(out):
            with self.assertRaises(SystemExit):
                main()
        report = json.loads(out.getvalue())
        expected = [{
            "instance": path,
            "valid": False,
            "errors": [
                {"kind": "data_invalid", "error": "missing_required_property", "path": "#",
                 "detail": "name", "value": {"age": -1}},
                {"kind": "data_invalid", "error": "not_in_range", "path": "#/age", "value": -1},
            ],
        }]
        diff = Compare().check(expected, report)
        assert diff == NO_DIFF

    def test_schemas_dir(self):
        schemas = os.path.join(self.tmp.name, "schemas")
        os.makedirs(schemas)
        with open(os.path.join(schemas, "tag.json"), "w", encoding="utf-8") as f:
            json.dump({"id": "http://example.com/tag.json", "type": "string", "pattern": "^#"}, f)
        schema_path = os.path.join(self.tmp.name, "tags.json")
        with open(schema_path, "w", encoding="utf-8") as f:
            json.dump({"items": {"$ref": "http://example.com/tag.json"}}, f)
        path = self.write_instance("t.json", [["#a", "#b"]])
        output = self.run_main("validate", path, "--schema", schema_path, "--schemas-dir", schemas)
        self.assertIn("1/1 instances valid", output)

    def test_version(self):
        self.assertIn("jsoncontract", self.run_main("--version"))


if __name__ == '__main__':
    unittest.main()
