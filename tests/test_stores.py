import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
SRC = os.path.join(ROOT, "src")
for path in (ROOT, SRC):
    if path not in sys.path:
        sys.path.insert(0, path)

from app.entities import get_entity
from app.seed import demo_records
from app.stores import MemoryEntityStore, MemoryViewStore, toggle_tag


class TestMemoryEntityStore(unittest.TestCase):
    def setUp(self) -> None:
        self.department = get_entity("department")
        self.approval = get_entity("student_approval")

    def test_create_appends_trimmed_record(self) -> None:
        store = MemoryEntityStore(self.department, [{"id": "1", "name": "Osaka"}])
        created = store.create({"name": " Kyoto "})
        self.assertEqual(created["name"], "Kyoto")
        self.assertNotEqual(created["id"], "1")
        self.assertEqual([r["name"] for r in store.list()], ["Osaka", "Kyoto"])
        self.assertEqual(store.get(created["id"]), created)

    def test_create_then_delete_restores_contents(self) -> None:
        store = MemoryEntityStore(self.department, [{"id": "1", "name": "Osaka"}])
        before = store.list()
        created = store.create({"name": "Kyoto"})
        self.assertTrue(store.delete(created["id"]))
        self.assertEqual(store.list(), before)

    def test_create_does_not_mutate_input(self) -> None:
        store = MemoryEntityStore(self.approval)
        fields = {"name": " Ada ", "email": "ada@example.com", "tags": [" N5 ", "N5"]}
        store.create(fields)
        self.assertEqual(fields, {"name": " Ada ", "email": "ada@example.com", "tags": [" N5 ", "N5"]})

    def test_ids_are_unique(self) -> None:
        store = MemoryEntityStore(self.department)
        ids = {store.create({"name": f"Dept {i}"})["id"] for i in range(50)}
        self.assertEqual(len(ids), 50)
        self.assertEqual(len(store), 50)

    def test_returned_records_are_copies(self) -> None:
        store = MemoryEntityStore(self.approval, demo_records(self.approval))
        record = store.get("STD-1001")
        record["tags"].append("Hacked")
        record["name"] = "Changed"
        listed = store.list()
        listed[0]["name"] = "Changed"
        fresh = store.get("STD-1001")
        self.assertEqual(fresh["name"], "Aarav Sharma")
        self.assertEqual(fresh["tags"], ["N5", "Frontend"])

    def test_update_keeps_position(self) -> None:
        store = MemoryEntityStore(self.department, [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}, {"id": "c", "name": "C"}])
        updated = store.update("b", {"name": " Bee "})
        self.assertEqual(updated, {"id": "b", "name": "Bee"})
        self.assertEqual(store.ids(), ["a", "b", "c"])

    def test_delete_preserves_order(self) -> None:
        store = MemoryEntityStore(self.department, [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}, {"id": "c", "name": "C"}])
        self.assertTrue(store.delete("b"))
        self.assertEqual(store.ids(), ["a", "c"])
        self.assertNotIn("b", store)

    def test_stale_ids_are_no_ops(self) -> None:
        store = MemoryEntityStore(self.department, [{"id": "a", "name": "A"}])
        self.assertIsNone(store.update("missing", {"name": "X"}))
        self.assertFalse(store.delete("missing"))
        self.assertIsNone(store.toggle_tag("missing", "tags", "x"))
        self.assertIsNone(store.get("missing"))
        self.assertEqual(store.list(), [{"id": "a", "name": "A"}])

    def test_unknown_keys_are_dropped(self) -> None:
        store = MemoryEntityStore(self.department)
        with self.assertLogs("masterdata.records", level="WARNING") as logs:
            record = store.create({"name": "Design", "budget": 10})
        self.assertNotIn("budget", record)
        self.assertIn("record_unknown_fields_dropped", logs.output[0])

    def test_invalid_numbers_are_dropped(self) -> None:
        store = MemoryEntityStore(get_entity("student"))
        with self.assertLogs("masterdata.records", level="WARNING") as logs:
            record = store.create({"name": "Ada", "age": float("inf"), "graduation_year": "2026"})
        self.assertIsNone(record["age"])
        self.assertEqual(record["graduation_year"], 2026)
        self.assertIn("record_invalid_values_dropped", logs.output[0])

    def test_create_fills_blank_fields(self) -> None:
        store = MemoryEntityStore(self.approval)
        record = store.create({"name": "Ada", "email": "ada@example.com"})
        self.assertEqual(record["approval_status"], "Pending")
        self.assertEqual(record["tags"], [])
        self.assertEqual(record["classification"], "")

    def test_seed_keeps_ids_and_skips_duplicates(self) -> None:
        store = MemoryEntityStore(self.department, [{"id": "old", "name": "Old"}])
        with self.assertLogs("masterdata.records", level="WARNING"):
            count = store.seed([{"id": "A", "name": "First"}, {"id": "A", "name": "Second"}, {"name": "No id"}])
        self.assertEqual(count, 2)
        self.assertNotIn("old", store)
        self.assertEqual(store.get("A")["name"], "First")
        generated = [rid for rid in store.ids() if rid != "A"]
        self.assertEqual(len(generated), 1)
        self.assertEqual(len(generated[0]), 36)

    def test_toggle_tag_on_record(self) -> None:
        store = MemoryEntityStore(self.approval, demo_records(self.approval))
        added = store.toggle_tag("STD-1001", "tags", "QA")
        self.assertEqual(added["tags"], ["N5", "Frontend", "QA"])
        removed = store.toggle_tag("STD-1001", "tags", "QA")
        self.assertEqual(removed["tags"], ["N5", "Frontend"])

    def test_generic_store_trims_values(self) -> None:
        store = MemoryEntityStore()
        record = store.create({"name": "  Tokyo ", "tags": [" a ", "a", ""], "id": "ignored"})
        self.assertEqual(record["name"], "Tokyo")
        self.assertEqual(record["tags"], ["a"])
        self.assertNotEqual(record["id"], "ignored")


class TestToggleTag(unittest.TestCase):
    def test_absent_value_is_appended(self) -> None:
        self.assertEqual(toggle_tag(["a", "b"], "c"), ["a", "b", "c"])

    def test_present_value_is_removed(self) -> None:
        self.assertEqual(toggle_tag(["a", "b", "c"], "b"), ["a", "c"])

    def test_twice_restores_original(self) -> None:
        original = ["N5", "Frontend"]
        self.assertEqual(toggle_tag(toggle_tag(original, "QA"), "QA"), original)
        self.assertEqual(original, ["N5", "Frontend"])

    def test_blank_value_and_none_tags(self) -> None:
        self.assertEqual(toggle_tag(["a"], "  "), ["a"])
        self.assertEqual(toggle_tag(None, " x "), ["x"])


class TestMemoryViewStore(unittest.TestCase):
    def test_mount_get_unmount(self) -> None:
        views = MemoryViewStore()
        first = views.mount("view-a")
        second = views.mount("view-b")
        self.assertNotEqual(first, second)
        self.assertEqual(views.get(first), "view-a")
        self.assertTrue(views.unmount(first))
        self.assertFalse(views.unmount(first))
        self.assertIsNone(views.get(first))
        self.assertEqual(views.get(second), "view-b")


if __name__ == "__main__":
    unittest.main()
