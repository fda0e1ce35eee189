import unittest
from datetime import datetime, timedelta, timezone

from portal.pipeline.ordering import (
    classify_leave,
    days_left,
    group_active_leaves,
    group_by_sector,
    name_sort_key,
    sector_counts,
    sort_by_rank_then_name,
    split_leaves,
)
from portal.schemas.entities import MedicalLeave, Personnel
from portal.schemas.enums import SECTOR_ORDER, LeaveStatus

BRT = timezone(timedelta(hours=-3))
NOW = datetime(2024, 6, 15, 12, 0, tzinfo=BRT)


def person(name, rank, sector="ADM", **extra):
    return Personnel(name=name, rank=rank, sector=sector, **extra)


def leave(war_name, leave_type="medical", end_date=None, indeterminate=False):
    return MedicalLeave(
        war_name=war_name,
        rank="Cabo",
        leave_type=leave_type,
        start_date="2024-06-01",
        end_date=end_date,
        is_indeterminate=indeterminate,
    )


class SortByRankThenNameTests(unittest.TestCase):
    def test_rank_hierarchy_is_primary_key(self) -> None:
        people = [
            person("Ana", "Coronel"),
            person("Bruno", "Soldado 2ª Classe"),
            person("Carla", "Cabo"),
            person("Davi", "Soldado 1ª Classe"),
        ]
        ordered = sort_by_rank_then_name(people)
        self.assertEqual(
            ["Soldado 2ª Classe", "Soldado 1ª Classe", "Cabo", "Coronel"],
            [p.rank for p in ordered],
        )

    def test_name_breaks_ties_ignoring_accents_and_case(self) -> None:
        people = [person("Bruno", "Cabo"), person("Álvaro", "Cabo"), person("alberto", "Cabo")]
        ordered = sort_by_rank_then_name(people)
        self.assertEqual(["alberto", "Álvaro", "Bruno"], [p.name for p in ordered])

    def test_same_letters_put_plain_then_lowercase_first(self) -> None:
        people = [person("Ána", "Cabo"), person("Ana", "Cabo"), person("ana", "Cabo")]
        ordered = sort_by_rank_then_name(people)
        self.assertEqual(["ana", "Ana", "Ána"], [p.name for p in ordered])
        self.assertLess(name_sort_key("ana"), name_sort_key("Ana"))

    def test_unknown_rank_sorts_after_known_ranks(self) -> None:
        people = [person("Zeca", "Delegado"), person("Ana", "Coronel"), person("Bia", None)]
        ordered = sort_by_rank_then_name(people)
        self.assertEqual("Coronel", ordered[0].rank)
        self.assertEqual({"Delegado", None}, {p.rank for p in ordered[1:]})

    def test_ties_keep_fetch_order(self) -> None:
        first = person("Silva", "Cabo", rg="1")
        second = person("Silva", "Cabo", rg="2")
        ordered = sort_by_rank_then_name([first, second])
        self.assertEqual(["1", "2"], [p.rg for p in ordered])

    def test_sorting_is_idempotent(self) -> None:
        people = [person("Carla", "Major"), person("Ana", "Cabo"), person("Beto", "Cabo")]
        once = sort_by_rank_then_name(people)
        twice = sort_by_rank_then_name(once)
        self.assertEqual([p.name for p in once], [p.name for p in twice])


class ClassifyLeaveTests(unittest.TestCase):
    def test_indeterminate_is_always_active(self) -> None:
        self.assertEqual(LeaveStatus.ACTIVE, classify_leave(leave("A", indeterminate=True), NOW))

    def test_leave_ending_today_is_active_until_end_of_day(self) -> None:
        today = leave("A", end_date="2024-06-15")
        self.assertEqual(LeaveStatus.ACTIVE, classify_leave(today, NOW))
        late_evening = datetime(2024, 6, 15, 23, 59, 59, tzinfo=BRT)
        self.assertEqual(LeaveStatus.ACTIVE, classify_leave(today, late_evening))
        next_day = datetime(2024, 6, 16, 0, 0, 0, tzinfo=BRT)
        self.assertEqual(LeaveStatus.RETURNED, classify_leave(today, next_day))

    def test_end_of_day_is_evaluated_at_utc_minus_three(self) -> None:
        today = leave("A", end_date="2024-06-15")
        # 02:30 UTC on the 16th is still 23:30 on the 15th in UTC-3
        utc_moment = datetime(2024, 6, 16, 2, 30, tzinfo=timezone.utc)
        self.assertEqual(LeaveStatus.ACTIVE, classify_leave(today, utc_moment))

    def test_past_end_date_is_returned(self) -> None:
        self.assertEqual(LeaveStatus.RETURNED, classify_leave(leave("A", end_date="2024-06-14"), NOW))

    def test_missing_end_date_without_indeterminate_is_returned(self) -> None:
        self.assertEqual(LeaveStatus.RETURNED, classify_leave(leave("A"), NOW))

    def test_clock_is_injected(self) -> None:
        item = leave("A", end_date="2024-06-20")
        self.assertEqual(LeaveStatus.ACTIVE, classify_leave(item, NOW))
        self.assertEqual(LeaveStatus.RETURNED, classify_leave(item, NOW + timedelta(days=10)))


class SplitAndGroupLeavesTests(unittest.TestCase):
    def test_partition_is_complete_and_disjoint(self) -> None:
        leaves = [
            leave("A", end_date="2024-06-20"),
            leave("B", end_date="2024-06-01"),
            leave("C", indeterminate=True),
            leave("D"),
        ]
        partition = split_leaves(leaves, NOW)
        active = {item.war_name for item in partition.active}
        returned = {item.war_name for item in partition.returned}
        self.assertEqual({"A", "C"}, active)
        self.assertEqual({"B", "D"}, returned)
        self.assertEqual(set(), active & returned)

    def test_active_order_indeterminate_first_then_ascending_end(self) -> None:
        leaves = [
            leave("late", end_date="2024-07-30"),
            leave("open", indeterminate=True),
            leave("soon", end_date="2024-06-16"),
        ]
        partition = split_leaves(leaves, NOW)
        self.assertEqual(["open", "soon", "late"], [item.war_name for item in partition.active])

    def test_returned_order_most_recent_first(self) -> None:
        leaves = [
            leave("old", end_date="2024-01-10"),
            leave("undated"),
            leave("recent", end_date="2024-06-10"),
        ]
        partition = split_leaves(leaves, NOW)
        self.assertEqual(["recent", "old", "undated"], [item.war_name for item in partition.returned])

    def test_groups_ordered_by_size_and_never_empty(self) -> None:
        active = [
            leave("A", "vacation", "2024-06-20"),
            leave("B", "medical", "2024-06-20"),
            leave("C", "vacation", "2024-06-20"),
            leave("D", "course", "2024-06-20"),
            leave("E", "vacation", "2024-06-20"),
            leave("F", "medical", "2024-06-20"),
        ]
        groups = group_active_leaves(active)
        self.assertEqual(["vacation", "medical", "course"], [g.leave_type for g in groups])
        self.assertEqual([3, 2, 1], [len(g.leaves) for g in groups])
        self.assertEqual("Férias", groups[0].label)
        self.assertTrue(all(g.leaves for g in groups))

    def test_group_ties_follow_leave_type_order(self) -> None:
        active = [leave("A", "judicial", "2024-06-20"), leave("B", "special", "2024-06-20")]
        groups = group_active_leaves(active)
        self.assertEqual(["special", "judicial"], [g.leave_type for g in groups])

    def test_no_active_leaves_gives_no_groups(self) -> None:
        self.assertEqual([], group_active_leaves([]))


class SectorGroupingTests(unittest.TestCase):
    def test_each_person_in_exactly_one_bucket(self) -> None:
        people = [person("A", "Cabo", "ROTAM"), person("B", "Cabo", "ADM"), person("C", "Cabo", "ROTAM")]
        groups = group_by_sector(people)
        self.assertEqual(["ROTAM", "ADM"], list(groups.keys()))
        self.assertEqual(len(people), sum(len(members) for members in groups.values()))
        self.assertEqual(["A", "C"], [p.name for p in groups["ROTAM"]])

    def test_sector_counts_include_every_known_sector(self) -> None:
        counts = sector_counts([person("A", "Cabo", "P2"), person("B", "Cabo", "P2")])
        for sector in SECTOR_ORDER:
            self.assertIn(sector, counts)
        self.assertEqual(2, counts["P2"])
        self.assertEqual(0, counts["COMANDO"])
        self.assertEqual(2, sum(counts.values()))


class DaysLeftTests(unittest.TestCase):
    def test_days_left_rounds_up(self) -> None:
        self.assertEqual(6, days_left(leave("A", end_date="2024-06-20"), NOW))
        self.assertEqual(1, days_left(leave("A", end_date="2024-06-15"), NOW))

    def test_days_left_after_end_is_not_positive(self) -> None:
        self.assertLessEqual(days_left(leave("A", end_date="2024-06-14"), NOW), 0)

    def test_days_left_undefined_for_indeterminate_or_undated(self) -> None:
        self.assertIsNone(days_left(leave("A", indeterminate=True), NOW))
        self.assertIsNone(days_left(leave("A"), NOW))


if __name__ == "__main__":
    unittest.main()
