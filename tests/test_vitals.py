from __future__ import annotations

import unittest

import numpy as np

from healthpanda.vitals import DEFAULT_VITALS, SimulatedValue, VitalSpec, VitalsSimulator, heart_rate_zone


class TestSimulatedValue(unittest.TestCase):
    def test_stays_within_bounds(self) -> None:
        sv = SimulatedValue(97, 94, 100, step_range=5, rng=np.random.default_rng(3))
        seen = [sv.step() for _ in range(2000)]
        self.assertGreaterEqual(min(seen), 94)
        self.assertLessEqual(max(seen), 100)
        self.assertTrue(all(round(v, 1) == v for v in seen))

    def test_initial_value_is_clamped(self) -> None:
        self.assertEqual(SimulatedValue(120, 50, 100).value, 100.0)

    def test_invalid_ranges(self) -> None:
        with self.assertRaises(ValueError):
            SimulatedValue(70, 100, 50)
        with self.assertRaises(ValueError):
            SimulatedValue(70, 50, 100, interval_sec=0)


class TestVitalsSimulator(unittest.TestCase):
    def test_each_vital_ticks_on_its_own_interval(self) -> None:
        specs = [
            VitalSpec("fast", "Fast", "", 50, 0, 100, interval_sec=1.0, step_range=10),
            VitalSpec("slow", "Slow", "", 50, 0, 100, interval_sec=5.0, step_range=10),
        ]
        sim = VitalsSimulator(specs, seed=11)
        before = sim.snapshot()

        after = sim.advance(4.0)
        self.assertNotEqual(after["fast"], before["fast"])
        self.assertEqual(after["slow"], before["slow"])

        after = sim.advance(1.0)
        self.assertNotEqual(after["slow"], before["slow"])

        with self.assertRaises(ValueError):
            sim.advance(-1)

    def test_seed_is_reproducible(self) -> None:
        a = VitalsSimulator(seed=5).trace(20)
        b = VitalsSimulator(seed=5).trace(20)
        self.assertTrue(a.equals(b))

    def test_trace_frame(self) -> None:
        df = VitalsSimulator(seed=1).trace(10, tick_sec=2)
        self.assertEqual(len(df), 6)
        self.assertEqual(list(df["t"]), [0.0, 2.0, 4.0, 6.0, 8.0, 10.0])
        expected = ["t"] + [spec.key for spec in DEFAULT_VITALS] + ["hr_zone"]
        self.assertEqual(list(df.columns), expected)
        for spec in DEFAULT_VITALS:
            with self.subTest(vital=spec.key):
                self.assertTrue(df[spec.key].between(spec.minimum, spec.maximum).all())
        self.assertEqual(list(df["hr_zone"]), [heart_rate_zone(v) for v in df["heart_rate"]])

        with self.assertRaises(ValueError):
            VitalsSimulator().trace(5, tick_sec=0)


class TestHeartRateZone(unittest.TestCase):
    def test_zones(self) -> None:
        cases = [(55, "Resting"), (60, "Normal"), (74.9, "Normal"), (75, "Fat Burn"), (90, "Cardio")]
        for bpm, zone in cases:
            with self.subTest(bpm=bpm):
                self.assertEqual(heart_rate_zone(bpm), zone)


if __name__ == "__main__":
    unittest.main()
