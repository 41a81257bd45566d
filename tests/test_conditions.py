import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
for path in (ROOT, SRC):
    if path not in sys.path:
        sys.path.insert(0, path)

from app.conditions import LEAF_OPS, eval_condition, field_value, matches


RECORD = {
    "id": "STD-1004",
    "name": "Yui Nakamura",
    "approval_status": "Pending",
    "tags": ["N3", "Data"],
    "age": 21,
}


class TestConditions(unittest.TestCase):
    def test_eq_is_exact(self) -> None:
        self.assertTrue(matches({"op": "eq", "field": "approval_status", "value": "Pending"}, RECORD))
        self.assertFalse(matches({"op": "eq", "field": "approval_status", "value": "pending"}, RECORD))
        self.assertFalse(matches({"op": "eq", "field": "approval_status", "value": "Pend"}, RECORD))

    def test_icontains_is_case_insensitive(self) -> None:
        self.assertTrue(matches({"op": "icontains", "field": "name", "value": "nakaMURA"}, RECORD))
        self.assertTrue(matches({"op": "icontains", "field": "tags", "value": "dat"}, RECORD))
        self.assertTrue(matches({"op": "icontains", "field": "age", "value": "2"}, RECORD))
        self.assertFalse(matches({"op": "icontains", "field": "missing", "value": "x"}, RECORD))

    def test_contains_is_membership_for_lists(self) -> None:
        self.assertTrue(matches({"op": "contains", "field": "tags", "value": "N3"}, RECORD))
        self.assertFalse(matches({"op": "contains", "field": "tags", "value": "N"}, RECORD))

    def test_boolean_composition(self) -> None:
        cond = {
            "op": "and",
            "conditions": [
                {"op": "or", "conditions": [
                    {"op": "icontains", "field": "id", "value": "9999"},
                    {"op": "icontains", "field": "name", "value": "yui"},
                ]},
                {"op": "eq", "field": "approval_status", "value": "Pending"},
            ],
        }
        self.assertTrue(matches(cond, RECORD))
        cond["conditions"][1]["value"] = "Rejected"
        self.assertFalse(matches(cond, RECORD))
        self.assertTrue(matches({"op": "and", "conditions": []}, RECORD))
        self.assertFalse(matches({"op": "or", "conditions": []}, RECORD))

    def test_dotted_field_paths(self) -> None:
        record = {"college": {"name": "Osaka University"}, "profile.email": "yui@example.com"}
        self.assertEqual(field_value(record, "college.name"), "Osaka University")
        self.assertEqual(field_value(record, "profile.email"), "yui@example.com")
        self.assertIsNone(field_value(record, "college.url"))
        self.assertTrue(matches({"op": "icontains", "field": "college.name", "value": "osaka"}, record))

    def test_unknown_op_and_malformed_condition(self) -> None:
        self.assertFalse(matches({"op": "regex", "field": "name", "value": ".*"}, RECORD))
        self.assertFalse(eval_condition({}, RECORD))
        self.assertFalse(eval_condition("eq", RECORD))
        self.assertTrue(matches(None, RECORD))
        self.assertFalse(matches({"op": "not", "condition": {"op": "eq", "field": "id", "value": "x"}}, RECORD))
        self.assertEqual(set(LEAF_OPS), {"eq", "contains", "icontains"})


if __name__ == "__main__":
    unittest.main()
