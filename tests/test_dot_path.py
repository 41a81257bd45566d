import os
import sys
import unittest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from masterdata.dot_path import (
    DotPathError,
    EmptySegment,
    KeyMissing,
    NotAContainer,
    flatten_keys,
    lookup,
    resolve_dot_path,
)


class TestDotPath(unittest.TestCase):
    def setUp(self) -> None:
        self.doc = {
            "addClient": {"errors": {"emailInvalid": "Enter a valid email address."}},
            "common": {"save": "Save"},
        }

    def test_resolves_nested_keys(self) -> None:
        self.assertEqual(resolve_dot_path(self.doc, "addClient.errors.emailInvalid"), "Enter a valid email address.")
        self.assertEqual(resolve_dot_path(self.doc, "common"), {"save": "Save"})

    def test_missing_key(self) -> None:
        with self.assertRaises(KeyMissing) as ctx:
            resolve_dot_path(self.doc, "addClient.errors.nope")
        self.assertEqual(ctx.exception.segment, "nope")
        self.assertEqual(ctx.exception.path_so_far, "addClient.errors")

    def test_traversing_into_a_string(self) -> None:
        with self.assertRaises(NotAContainer):
            resolve_dot_path(self.doc, "common.save.label")

    def test_empty_segments(self) -> None:
        with self.assertRaises(EmptySegment):
            resolve_dot_path(self.doc, "")
        with self.assertRaises(EmptySegment):
            resolve_dot_path(self.doc, "common..save")

    def test_errors_share_a_base(self) -> None:
        with self.assertRaises(DotPathError):
            resolve_dot_path(self.doc, "missing")

    def test_lookup_default(self) -> None:
        self.assertEqual(lookup(self.doc, "common.save"), "Save")
        self.assertIsNone(lookup(self.doc, "common.cancel"))
        self.assertEqual(lookup(self.doc, "common.cancel", "x"), "x")

    def test_flatten_keys(self) -> None:
        self.assertEqual(flatten_keys(self.doc), ["addClient.errors.emailInvalid", "common.save"])
        self.assertEqual(flatten_keys("leaf"), [])


if __name__ == "__main__":
    unittest.main()
