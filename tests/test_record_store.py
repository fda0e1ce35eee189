import unittest
from unittest.mock import AsyncMock, MagicMock

from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from portal.store.base import OrderBy, Predicate, RecordNotFoundError, StoreReadError, StoreWriteError
from portal.store.memory_store import InMemoryRecordStore
from portal.store.mongo_store import MongoRecordStore, build_mongo_filter


def seeded_store():
    return InMemoryRecordStore(
        {
            "vehicles": [
                {"_id": "v1", "registrationNumber": 1202891, "inspectionDate": "2024-03-01", "city": "Missal"},
                {"_id": "v2", "registrationNumber": 1202893, "inspectionDate": "2024-05-01", "city": "Medianeira"},
                {"_id": "v3", "registrationNumber": 1202892, "inspectionDate": "2024-04-01", "city": "Medianeira"},
            ]
        }
    )


class PredicateTests(unittest.TestCase):
    def test_only_whitelisted_operators(self) -> None:
        with self.assertRaises(ValueError):
            Predicate("plate", "$where", "1 == 1")

    def test_range_predicate_skips_missing_values(self) -> None:
        self.assertFalse(Predicate("inspectionDate", "gte", "2024-01-01").matches({}))
        self.assertTrue(Predicate("inspectionDate", "lte", "2024-12-31").matches({"inspectionDate": "2024-06-01"}))

    def test_order_direction_is_checked(self) -> None:
        with self.assertRaises(ValueError):
            OrderBy("name", "sideways")


class InMemoryRecordStoreTests(unittest.IsolatedAsyncioTestCase):
    async def test_get_all_keeps_insertion_order(self) -> None:
        store = seeded_store()
        records = await store.get_all("vehicles")
        self.assertEqual(["v1", "v2", "v3"], [r["_id"] for r in records])

    async def test_unknown_collection_is_empty(self) -> None:
        self.assertEqual([], await InMemoryRecordStore().get_all("assets"))

    async def test_filtered_ordered_and_limited(self) -> None:
        store = seeded_store()
        records = await store.get_filtered(
            "vehicles",
            [Predicate("city", "eq", "Medianeira")],
            order_by=OrderBy("registrationNumber", "desc"),
            limit=1,
        )
        self.assertEqual(["v2"], [r["_id"] for r in records])

    async def test_inclusive_range(self) -> None:
        store = seeded_store()
        records = await store.get_filtered(
            "vehicles",
            [Predicate("inspectionDate", "gte", "2024-03-01"), Predicate("inspectionDate", "lte", "2024-04-01")],
        )
        self.assertEqual(["v1", "v3"], [r["_id"] for r in records])

    async def test_insert_update_delete(self) -> None:
        store = InMemoryRecordStore()
        record_id = await store.insert("assets", {"description": "Mesa"})
        self.assertTrue(ObjectId.is_valid(record_id))

        await store.update("assets", record_id, {"sector": "P2"})
        self.assertEqual({"_id": record_id, "description": "Mesa", "sector": "P2"}, await store.get_one("assets", record_id))

        await store.delete("assets", record_id)
        self.assertIsNone(await store.get_one("assets", record_id))

    async def test_unknown_id_on_write(self) -> None:
        store = InMemoryRecordStore()
        with self.assertRaises(RecordNotFoundError):
            await store.update("assets", "missing", {"sector": "P2"})
        with self.assertRaises(RecordNotFoundError):
            await store.delete("assets", "missing")

    async def test_returned_documents_are_copies(self) -> None:
        store = seeded_store()
        [first, *_] = await store.get_all("vehicles")
        first["city"] = "changed"
        self.assertEqual("Missal", (await store.get_one("vehicles", "v1"))["city"])

    async def test_injected_failures(self) -> None:
        store = seeded_store()
        store.inject_failure("get_filtered")
        store.inject_failure("insert")
        with self.assertRaises(StoreReadError):
            await store.get_filtered("vehicles")
        with self.assertRaises(StoreWriteError):
            await store.insert("vehicles", {})
        self.assertEqual(3, len(await store.get_filtered("vehicles")))


class MongoFilterTests(unittest.TestCase):
    def test_empty_predicates_match_everything(self) -> None:
        self.assertEqual({}, build_mongo_filter([]))

    def test_range_on_one_field_is_merged(self) -> None:
        query = build_mongo_filter(
            [
                Predicate("plate", "eq", "ABC1D23"),
                Predicate("inspectionDate", "gte", "2024-01-01"),
                Predicate("inspectionDate", "lte", "2024-12-31"),
            ]
        )
        self.assertEqual(
            {
                "plate": {"$eq": "ABC1D23"},
                "inspectionDate": {"$gte": "2024-01-01", "$lte": "2024-12-31"},
            },
            query,
        )


class MongoRecordStoreTests(unittest.IsolatedAsyncioTestCase):
    def _store(self, collection: MagicMock) -> MongoRecordStore:
        db = MagicMock()
        db.__getitem__.return_value = collection
        return MongoRecordStore(db)

    async def test_get_filtered_applies_sort_and_limit(self) -> None:
        cursor = MagicMock()
        cursor.sort.return_value = cursor
        cursor.limit.return_value = cursor
        cursor.to_list = AsyncMock(return_value=[{"_id": "x", "registrationNumber": 5}])
        collection = MagicMock()
        collection.find.return_value = cursor

        records = await self._store(collection).get_filtered(
            "vehicles", order_by=OrderBy("registrationNumber", "desc"), limit=1
        )

        self.assertEqual([{"_id": "x", "registrationNumber": 5}], records)
        collection.find.assert_called_once_with({})
        cursor.sort.assert_called_once_with("registrationNumber", DESCENDING)
        cursor.limit.assert_called_once_with(1)

    async def test_fetch_failure_becomes_store_read_error(self) -> None:
        collection = MagicMock()
        collection.find.side_effect = PyMongoError("connection refused")
        with self.assertRaises(StoreReadError) as ctx:
            await self._store(collection).get_all("personnel")
        self.assertEqual("PORTAL-STORE-001", ctx.exception.error_code)

    async def test_insert_strips_ids(self) -> None:
        inserted = ObjectId()
        collection = MagicMock()
        collection.insert_one = AsyncMock(return_value=MagicMock(inserted_id=inserted))

        record_id = await self._store(collection).insert("assets", {"id": "old", "description": "Mesa"})

        self.assertEqual(str(inserted), record_id)
        collection.insert_one.assert_awaited_once_with({"description": "Mesa"})

    async def test_update_unmatched_is_not_found(self) -> None:
        collection = MagicMock()
        collection.update_one = AsyncMock(return_value=MagicMock(matched_count=0))
        with self.assertRaises(RecordNotFoundError):
            await self._store(collection).update("assets", str(ObjectId()), {"sector": "P2"})

    async def test_invalid_object_id_reads_as_missing(self) -> None:
        collection = MagicMock()
        self.assertIsNone(await self._store(collection).get_one("assets", "not-an-id"))
        collection.find_one.assert_not_called()


if __name__ == "__main__":
    unittest.main()
