import unittest
from datetime import datetime, timedelta, timezone

from portal.pipeline.aggregation import (
    aggregate,
    medical_leave_stats,
    percentage,
    personnel_stats,
    vehicle_stats,
)
from portal.schemas.entities import MedicalLeave, Personnel, Vehicle
from portal.utils.formatters import format_percentage

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone(timedelta(hours=-3)))


class PercentageTests(unittest.TestCase):
    def test_one_decimal_place(self) -> None:
        self.assertEqual(33.3, percentage(1, 3))
        self.assertEqual(66.7, percentage(2, 3))
        self.assertEqual("33.3", format_percentage(percentage(1, 3)))

    def test_zero_total_is_zero(self) -> None:
        self.assertEqual(0.0, percentage(0, 0))


class AggregateTests(unittest.TestCase):
    def test_counts_sum_to_total_with_missing_values(self) -> None:
        people = [
            Personnel(name="A", sector="ADM", city="Missal"),
            Personnel(name="B", sector="ADM", city=None),
            Personnel(name="C", sector="P2", city=""),
        ]
        stats = personnel_stats(people)
        self.assertEqual(3, stats.total)
        for name in ("sector", "rank", "city", "platoon"):
            self.assertEqual(3, sum(item.count for item in stats.dimension(name)), msg=name)
        self.assertEqual(2, stats.count_of("city", "Não informado"))

    def test_categories_in_first_appearance_order(self) -> None:
        people = [Personnel(sector="RPA"), Personnel(sector="ADM"), Personnel(sector="RPA")]
        stats = personnel_stats(people)
        self.assertEqual(["RPA", "ADM"], [item.category for item in stats.dimension("sector")])
        self.assertEqual([66.7, 33.3], [item.percentage for item in stats.dimension("sector")])

    def test_empty_input(self) -> None:
        stats = aggregate([], [("sector", lambda item: item.sector)])
        self.assertEqual(0, stats.total)
        self.assertEqual([], stats.dimension("sector"))

    def test_vehicle_key_dimension_always_has_both_categories(self) -> None:
        vehicles = [Vehicle(has_key=True, vehicle_type="Automóvel"), Vehicle(has_key=True, vehicle_type="Motocicleta")]
        stats = vehicle_stats(vehicles)
        self.assertEqual(["Sim", "Não"], [item.category for item in stats.dimension("key")])
        self.assertEqual(2, stats.count_of("key", "Sim"))
        self.assertEqual(0, stats.count_of("key", "Não"))

    def test_medical_leave_status_uses_clock(self) -> None:
        leaves = [
            MedicalLeave(leave_type="medical", end_date="2024-06-20"),
            MedicalLeave(leave_type="vacation", end_date="2024-06-01"),
            MedicalLeave(leave_type="medical", is_indeterminate=True),
        ]
        stats = medical_leave_stats(leaves, NOW)
        self.assertEqual(2, stats.count_of("status", "active"))
        self.assertEqual(1, stats.count_of("status", "returned"))
        self.assertEqual(2, stats.count_of("type", "Licença Médica"))

        later = medical_leave_stats(leaves, NOW + timedelta(days=30))
        self.assertEqual(1, later.count_of("status", "active"))
        self.assertEqual(2, later.count_of("status", "returned"))


class PercentageSumTests(unittest.TestCase):
    """Rounded shares of every dimension add up to 100 within rounding error."""

    def assertSharesSumToHundred(self, stats) -> None:
        for name, items in stats.dimensions.items():
            counted = [item for item in items if item.count]
            tolerance = 0.1 * len(counted)
            self.assertAlmostEqual(100.0, sum(item.percentage for item in items), delta=tolerance, msg=name)

    def test_three_way_split(self) -> None:
        stats = personnel_stats([Personnel(sector="ADM"), Personnel(sector="P2"), Personnel(sector="RPA")])
        self.assertEqual([33.3, 33.3, 33.3], [item.percentage for item in stats.dimension("sector")])
        self.assertSharesSumToHundred(stats)

    def test_personnel_dimensions(self) -> None:
        people = [
            Personnel(sector="ADM", rank="Cabo", city="Missal", platoon="1º Pelotão"),
            Personnel(sector="ADM", rank="Major", city="SMI", platoon="2º Pelotão"),
            Personnel(sector="P2", rank="Cabo", city=None, platoon="1º Pelotão"),
            Personnel(sector="RPA", rank="Soldado 1ª Classe", city="Missal"),
            Personnel(sector="ROTAM", rank="Cabo", city="Medianeira", platoon="2º Pelotão"),
            Personnel(sector="COPOM", rank="Capitão", city="Medianeira", platoon="1º Pelotão"),
        ]
        self.assertSharesSumToHundred(personnel_stats(people))

    def test_vehicle_dimensions(self) -> None:
        vehicles = [
            Vehicle(vehicle_type="Automóvel", has_key=True, state="PR", city="Missal"),
            Vehicle(vehicle_type="Motocicleta", has_key=False, state="PR", city="Medianeira"),
            Vehicle(vehicle_type="Caminhão", has_key=True, state="SC", city="SMI"),
        ]
        stats = vehicle_stats(vehicles)
        self.assertEqual([66.7, 33.3], [item.percentage for item in stats.dimension("key")])
        self.assertSharesSumToHundred(stats)

    def test_medical_leave_dimensions(self) -> None:
        leaves = [
            MedicalLeave(leave_type="medical", end_date="2024-06-20"),
            MedicalLeave(leave_type="vacation", end_date="2024-06-01"),
            MedicalLeave(leave_type="training", is_indeterminate=True),
        ]
        stats = medical_leave_stats(leaves, NOW)
        self.assertEqual([33.3, 33.3, 33.3], [item.percentage for item in stats.dimension("type")])
        self.assertSharesSumToHundred(stats)


if __name__ == "__main__":
    unittest.main()
