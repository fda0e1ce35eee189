import unittest

from portal.pipeline.registration import next_registration_number
from portal.store.memory_store import InMemoryRecordStore


class NextRegistrationNumberTests(unittest.IsolatedAsyncioTestCase):
    async def test_empty_collection_returns_seed(self) -> None:
        self.assertEqual(1202890, await next_registration_number(InMemoryRecordStore()))

    async def test_custom_seed(self) -> None:
        self.assertEqual(500, await next_registration_number(InMemoryRecordStore(), seed=500))

    async def test_highest_number_plus_one(self) -> None:
        store = InMemoryRecordStore(
            {
                "vehicles": [
                    {"registrationNumber": 1202895},
                    {"registrationNumber": 1202890},
                    {"registrationNumber": 1202893},
                ]
            }
        )
        self.assertEqual(1202896, await next_registration_number(store))

    async def test_highest_record_without_number_returns_seed(self) -> None:
        store = InMemoryRecordStore({"vehicles": [{"plate": "ABC1D23"}]})
        self.assertEqual(1202890, await next_registration_number(store))

    async def test_unparseable_number_returns_seed(self) -> None:
        store = InMemoryRecordStore({"vehicles": [{"registrationNumber": "abc"}]})
        self.assertEqual(1202890, await next_registration_number(store))

    async def test_reads_without_write_see_the_same_maximum(self) -> None:
        # Allocation is read-then-write; two readers before a write collide.
        store = InMemoryRecordStore({"vehicles": [{"registrationNumber": 1202900}]})
        first = await next_registration_number(store)
        second = await next_registration_number(store)
        self.assertEqual(first, second)

        await store.insert("vehicles", {"registrationNumber": first})
        self.assertEqual(first + 1, await next_registration_number(store))


if __name__ == "__main__":
    unittest.main()
