import math
import unittest

from pert.engine import PERTScheduler
from pert.errors import CircularDependencyError, EmptyProjectError, MissingPredecessorError
from pert.samples import SAMPLE_ACTIVITIES, load_sample_project


class TestActivityRegistry(unittest.TestCase):
    def setUp(self):
        self.scheduler = PERTScheduler()

    def test_add_and_find(self):
        ok, msg = self.scheduler.add_activity("A", 3, [])
        self.assertTrue(ok)
        self.assertIn("A", msg)

        act = self.scheduler.find("A")
        self.assertIsNotNone(act)
        self.assertEqual(act.duration, 3.0)
        self.assertEqual(act.predecessors, [])
        self.assertEqual(act.successors, [])
        self.assertEqual((act.es, act.ef, act.ls, act.lf, act.slack), (0.0, 0.0, 0.0, 0.0, 0.0))
        self.assertIsNone(self.scheduler.find("Z"))

    def test_rejects_invalid_input_without_mutation(self):
        self.scheduler.add_activity("A", 3)

        for args in (("", 1), ("   ", 1), ("B", -1), ("A", 5), ("C", float("nan")), ("D", "abc")):
            ok, _ = self.scheduler.add_activity(*args)
            self.assertFalse(ok, args)

        self.assertEqual(list(self.scheduler.activities), ["A"])
        self.assertEqual(self.scheduler.find("A").duration, 3.0)

    def test_find_strips_whitespace_like_add(self):
        self.scheduler.add_activity(" A ", 1)
        self.assertIs(self.scheduler.find(" A "), self.scheduler.find("A"))
        self.assertIsNotNone(self.scheduler.find("A"))
        self.assertIsNone(self.scheduler.find(5))

    def test_non_string_id_is_rejected(self):
        for bad_id in (5, 1.5, ["A"]):
            ok, msg = self.scheduler.add_activity(bad_id, 1)
            self.assertFalse(ok)
            self.assertIn("string", msg)
        self.assertEqual(self.scheduler.activities, {})

        ok, _ = self.scheduler.add_activity(None, 1)
        self.assertFalse(ok)

    def test_zero_duration_is_accepted(self):
        ok, _ = self.scheduler.add_activity("MILESTONE", 0)
        self.assertTrue(ok)

    def test_add_invalidates_previous_schedule(self):
        self.scheduler.add_activity("A", 2)
        self.scheduler.add_activity("B", 4, ["A"])
        ok, _ = self.scheduler.calculate()
        self.assertTrue(ok)
        self.assertEqual(self.scheduler.get_project_duration(), 6)

        self.scheduler.add_activity("C", 1, ["B"])
        self.assertEqual(self.scheduler.get_project_duration(), 0)
        self.assertIsNone(self.scheduler.get_critical_path())
        self.assertEqual(self.scheduler.topological_order, [])
        self.assertEqual(self.scheduler.find("B").ef, 0.0)
        self.assertEqual(self.scheduler.find("A").successors, [])

    def test_clear(self):
        self.scheduler.add_activity("A", 2)
        self.scheduler.calculate()
        self.scheduler.clear()

        self.assertEqual(self.scheduler.activities, {})
        self.assertEqual(self.scheduler.calculation_log, [])
        self.assertEqual(self.scheduler.get_project_duration(), 0)
        self.assertIsNone(self.scheduler.get_critical_path())


class TestCalculation(unittest.TestCase):
    def assert_schedule_invariants(self, scheduler):
        for act in scheduler.activities.values():
            self.assertAlmostEqual(act.ef, act.es + act.duration)
            self.assertAlmostEqual(act.ls, act.lf - act.duration)
            self.assertAlmostEqual(act.slack, act.ls - act.es)
            self.assertGreaterEqual(act.slack, 0)
            self.assertEqual(math.copysign(1.0, act.slack), 1.0)
            if not act.successors:
                self.assertEqual(act.lf, scheduler.get_project_duration())

        self.assertEqual(
            scheduler.get_project_duration(),
            max(act.ef for act in scheduler.activities.values()),
        )

        path = scheduler.critical_path
        for act_id in path:
            self.assertEqual(scheduler.find(act_id).slack, 0)
        for prev_id, next_id in zip(path, path[1:]):
            self.assertIn(next_id, scheduler.find(prev_id).successors)
            self.assertEqual(scheduler.find(prev_id).ef, scheduler.find(next_id).es)

    def test_branching_project(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 2, [])
        scheduler.add_activity("B", 4, ["A"])
        scheduler.add_activity("C", 3, ["A"])

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertEqual(scheduler.get_project_duration(), 6)
        self.assertEqual(scheduler.find("A").slack, 0)
        self.assertEqual(scheduler.find("B").slack, 0)
        self.assertEqual(scheduler.find("C").slack, 1)
        self.assertEqual(scheduler.get_critical_path(), ["A", "B"])
        self.assert_schedule_invariants(scheduler)

    def test_single_activity(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 5, [])

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        act = scheduler.find("A")
        self.assertEqual((act.es, act.ef, act.ls, act.lf, act.slack), (0, 5, 0, 5, 0))
        self.assertEqual(scheduler.get_project_duration(), 5)
        self.assertEqual(scheduler.get_critical_path(), ["A"])

    def test_sample_project(self):
        scheduler = PERTScheduler()
        self.assertEqual(load_sample_project(scheduler), len(SAMPLE_ACTIVITIES))

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertEqual(scheduler.get_project_duration(), 44)
        self.assertEqual(
            scheduler.topological_order,
            ["A", "B", "C", "D", "E", "I", "G", "F", "H", "J", "M", "K", "L", "N"],
        )
        self.assertEqual(scheduler.get_critical_path(), ["A", "B", "C", "E", "F", "J", "L", "N"])

        expected_slack = {"D": 4, "G": 4, "H": 4, "M": 4, "I": 2, "K": 1}
        for act_id in scheduler.activities:
            self.assertEqual(scheduler.find(act_id).slack, expected_slack.get(act_id, 0), act_id)

        h = scheduler.find("H")
        self.assertEqual((h.es, h.ef, h.ls, h.lf), (29, 38, 33, 42))
        self.assertEqual(scheduler.find("C").successors, ["D", "E", "I"])
        self.assert_schedule_invariants(scheduler)

    def test_successors_follow_insertion_order(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("Z", 1)
        scheduler.add_activity("Y", 1, ["Z"])
        scheduler.add_activity("X", 1, ["Z"])

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertEqual(scheduler.find("Z").successors, ["Y", "X"])
        self.assertEqual(scheduler.topological_order, ["Z", "Y", "X"])
        self.assertEqual(scheduler.get_critical_path(), ["Z", "Y"])

    def test_only_first_critical_path_is_reported(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 2)
        scheduler.add_activity("B", 2)
        scheduler.add_activity("C", 2, ["A", "B"])

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertTrue(scheduler.find("B").is_critical)
        self.assertEqual(scheduler.get_critical_path(), ["A", "C"])

    def test_fractional_durations_keep_zero_slack(self):
        scheduler = PERTScheduler(slack_tolerance=1e-9)
        scheduler.add_activity("A", 0.1)
        scheduler.add_activity("B", 0.2, ["A"])
        scheduler.add_activity("C", 0.3, ["B"])

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        for act in scheduler.activities.values():
            self.assertEqual(act.slack, 0.0)
            self.assertEqual(math.copysign(1.0, act.slack), 1.0)
        self.assertEqual(scheduler.get_critical_path(), ["A", "B", "C"])
        self.assertAlmostEqual(scheduler.get_project_duration(), 0.6)

    def test_tiny_slack_is_kept_by_default(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 1e-10)
        scheduler.add_activity("B", 2e-10)

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertEqual(scheduler.find("A").slack, 1e-10)
        self.assertFalse(scheduler.find("A").is_critical)
        self.assertEqual(scheduler.get_critical_path(), ["B"])

    def test_tolerance_absorbs_tiny_slack_when_enabled(self):
        scheduler = PERTScheduler(slack_tolerance=1e-9)
        scheduler.add_activity("A", 1e-10)
        scheduler.add_activity("B", 2e-10)

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertEqual(scheduler.find("A").slack, 0.0)
        self.assertEqual(scheduler.get_critical_path(), ["A"])

    def test_zero_duration_activities(self):
        scheduler = PERTScheduler(slack_tolerance=0.0)
        scheduler.add_activity("START", 0)
        scheduler.add_activity("WORK", 3, ["START"])
        scheduler.add_activity("END", 0, ["WORK"])

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertEqual(scheduler.get_critical_path(), ["START", "WORK", "END"])
        self.assert_schedule_invariants(scheduler)

    def test_recalculation_is_repeatable(self):
        scheduler = PERTScheduler()
        load_sample_project(scheduler)
        scheduler.calculate()
        first = scheduler.get_results_dataframe()

        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertTrue(first.equals(scheduler.get_results_dataframe()))


class TestCalculationFailures(unittest.TestCase):
    def test_empty_project(self):
        scheduler = PERTScheduler()
        ok, msg = scheduler.calculate()
        self.assertFalse(ok)
        self.assertIsInstance(scheduler.last_error, EmptyProjectError)
        self.assertIn("No activities", msg)
        self.assertIsNone(scheduler.get_critical_path())
        self.assertEqual(scheduler.get_project_duration(), 0)

    def test_missing_predecessor(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 1)
        scheduler.add_activity("B", 1, ["X"])

        ok, msg = scheduler.calculate()
        self.assertFalse(ok)
        self.assertIn("X", msg)
        self.assertIn("B", msg)
        self.assertIsInstance(scheduler.last_error, MissingPredecessorError)
        self.assertEqual(scheduler.last_error.activity_id, "B")
        self.assertEqual(scheduler.last_error.predecessor_id, "X")
        self.assertEqual(scheduler.topological_order, [])

    def test_cycle(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("S", 1)
        scheduler.add_activity("A", 1, ["S", "B"])
        scheduler.add_activity("B", 1, ["A"])

        ok, msg = scheduler.calculate()
        self.assertFalse(ok)
        self.assertIn("Circular dependency", msg)
        self.assertIsInstance(scheduler.last_error, CircularDependencyError)
        self.assertEqual(sorted(scheduler.last_error.unresolved), ["A", "B"])
        self.assertEqual(scheduler.topological_order, [])
        self.assertFalse(scheduler.is_calculated)
        self.assertIsNone(scheduler.get_critical_path())

    def test_self_dependency_is_a_cycle(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 1, ["A"])

        ok, _ = scheduler.calculate()
        self.assertFalse(ok)
        self.assertIsInstance(scheduler.last_error, CircularDependencyError)

    def test_failed_recalculation_clears_schedule(self):
        scheduler = PERTScheduler()
        load_sample_project(scheduler)
        ok, _ = scheduler.calculate()
        self.assertTrue(ok)

        scheduler.add_activity("O", 3, ["MISSING"])
        ok, _ = scheduler.calculate()
        self.assertFalse(ok)
        self.assertFalse(scheduler.is_calculated)
        self.assertEqual(scheduler.get_project_duration(), 0)
        self.assertIsNone(scheduler.get_critical_path())
        self.assertTrue(scheduler.calculation_log[-1].startswith("ERROR"))

    def test_success_resets_last_error(self):
        scheduler = PERTScheduler()
        scheduler.calculate()
        self.assertIsNotNone(scheduler.last_error)

        scheduler.add_activity("A", 1)
        ok, _ = scheduler.calculate()
        self.assertTrue(ok)
        self.assertIsNone(scheduler.last_error)


class TestExport(unittest.TestCase):
    def test_results_dataframe_in_topological_order(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 2)
        scheduler.add_activity("B", 4, ["A"])
        scheduler.add_activity("C", 3, ["A"])
        scheduler.calculate()

        df = scheduler.get_results_dataframe()
        self.assertEqual(list(df["ID"]), ["A", "B", "C"])
        self.assertEqual(list(df["Critical"]), ["Yes", "Yes", "No"])
        self.assertEqual(df.loc[df["ID"] == "C", "Slack"].iloc[0], 1)
        self.assertEqual(df.loc[df["ID"] == "B", "Predecessors"].iloc[0], "A")

    def test_activities_dataframe(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 2)
        scheduler.add_activity("B", 4, ["A"])

        df = scheduler.get_activities_dataframe()
        self.assertEqual(list(df.columns), ["ID", "Duration", "Predecessors"])
        self.assertEqual(len(df), 2)

    def test_from_dict_restores_calculated_schedule(self):
        scheduler = PERTScheduler(slack_tolerance=0.5)
        load_sample_project(scheduler)
        scheduler.calculate()

        restored = PERTScheduler.from_dict(scheduler.to_dict())
        self.assertEqual(restored.slack_tolerance, 0.5)
        self.assertEqual(restored.get_project_duration(), 44)
        self.assertEqual(restored.get_critical_path(), scheduler.get_critical_path())

    def test_from_dict_uncalculated(self):
        scheduler = PERTScheduler()
        scheduler.add_activity("A", 1)

        restored = PERTScheduler.from_dict(scheduler.to_dict())
        self.assertIn("A", restored.activities)
        self.assertFalse(restored.is_calculated)


if __name__ == "__main__":
    unittest.main()
