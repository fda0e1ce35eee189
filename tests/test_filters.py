import unittest

from portal.pipeline.filters import PersonnelFilter, VehicleFilter, in_date_range
from portal.schemas.entities import Personnel, Vehicle


def vehicles():
    return [
        Vehicle(id="1", registration_number=1202890, plate="ABC1D23", city="Medianeira",
                vehicle_type="Automóvel", inspection_date="2024-03-01"),
        Vehicle(id="2", registration_number=1202891, plate="XYZ9K88", city="Missal",
                vehicle_type="Motocicleta", inspection_date="2024-03-15"),
        Vehicle(id="3", registration_number=1202892, plate="QWE4R56", city="Medianeira",
                vehicle_type="Motocicleta", inspection_date="2024-04-02T10:00:00.000Z"),
    ]


class VehicleFilterTests(unittest.TestCase):
    def test_unset_filter_returns_everything_in_order(self) -> None:
        self.assertEqual(["1", "2", "3"], [v.id for v in VehicleFilter().apply(vehicles())])
        self.assertEqual(["1", "2", "3"], [v.id for v in VehicleFilter(city="", plate="").apply(vehicles())])

    def test_predicates_are_and_combined(self) -> None:
        result = VehicleFilter(city="Medianeira", vehicle_type="Motocicleta").apply(vehicles())
        self.assertEqual(["3"], [v.id for v in result])

    def test_plate_is_uppercased(self) -> None:
        result = VehicleFilter(plate="xyz9k88").apply(vehicles())
        self.assertEqual(["2"], [v.id for v in result])

    def test_registration_number_equality(self) -> None:
        result = VehicleFilter(registration_number="1202891").apply(vehicles())
        self.assertEqual(["2"], [v.id for v in result])

    def test_inspection_range_is_inclusive(self) -> None:
        result = VehicleFilter(inspection_from="2024-03-01", inspection_to="2024-03-15").apply(vehicles())
        self.assertEqual(["1", "2"], [v.id for v in result])

    def test_inspection_range_compares_date_prefix(self) -> None:
        result = VehicleFilter(inspection_from="2024-04-02", inspection_to="2024-04-02").apply(vehicles())
        self.assertEqual(["3"], [v.id for v in result])

    def test_to_predicates(self) -> None:
        predicates = VehicleFilter(plate="abc", inspection_from="2024-01-01").to_predicates()
        self.assertEqual(
            [("plate", "eq", "ABC"), ("inspectionDate", "gte", "2024-01-01")],
            [(p.field, p.op, p.value) for p in predicates],
        )


class PersonnelFilterTests(unittest.TestCase):
    def test_sector_filter(self) -> None:
        people = [Personnel(name="A", sector="ADM"), Personnel(name="B", sector="P2")]
        self.assertEqual(["B"], [p.name for p in PersonnelFilter(sector="P2").apply(people)])
        self.assertEqual(["A", "B"], [p.name for p in PersonnelFilter().apply(people)])


class DateRangeTests(unittest.TestCase):
    def test_open_ended_ranges(self) -> None:
        self.assertTrue(in_date_range("2024-05-05", "2024-05-01", None))
        self.assertFalse(in_date_range("2024-04-30", "2024-05-01", None))
        self.assertTrue(in_date_range("2024-04-30", None, "2024-05-01"))

    def test_missing_value_fails_when_range_set(self) -> None:
        self.assertFalse(in_date_range(None, "2024-05-01", None))
        self.assertTrue(in_date_range(None, None, None))


if __name__ == "__main__":
    unittest.main()
