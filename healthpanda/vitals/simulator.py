from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class VitalSpec:
    key: str
    label: str
    unit: str
    initial: float
    minimum: float
    maximum: float
    interval_sec: float = 2.0
    step_range: float = 3.0


DEFAULT_VITALS: tuple[VitalSpec, ...] = (
    VitalSpec("heart_rate", "Heart rate", "bpm", 72, 58, 105, 1.8, 4),
    VitalSpec("spo2", "Blood oxygen", "%", 97, 94, 100, 3.0, 0.5),
    VitalSpec("hrv", "HRV", "ms", 42, 28, 68, 4.0, 3),
    VitalSpec("skin_temp", "Skin temperature", "°C", 36.4, 35.8, 37.2, 5.0, 0.2),
    VitalSpec("stress", "Stress", "", 28, 10, 85, 6.0, 6),
    VitalSpec("resp_rate", "Respiration", "br/min", 16, 12, 22, 4.5, 1),
)


def heart_rate_zone(bpm: float) -> str:
    if bpm < 60:
        return "Resting"
    if bpm < 75:
        return "Normal"
    if bpm < 90:
        return "Fat Burn"
    return "Cardio"


class SimulatedValue:
    """Bounded random walk: each step moves by U(-step_range, step_range) and clamps."""

    def __init__(
        self,
        initial: float,
        minimum: float,
        maximum: float,
        interval_sec: float = 2.0,
        step_range: float = 3.0,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        if minimum > maximum:
            raise ValueError(f"minimum {minimum} > maximum {maximum}")
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self.minimum = float(minimum)
        self.maximum = float(maximum)
        self.interval_sec = float(interval_sec)
        self.step_range = abs(float(step_range))
        self.rng = rng if rng is not None else np.random.default_rng()
        self._current = float(np.clip(initial, self.minimum, self.maximum))
        self.value = round(self._current, 1)

    @classmethod
    def from_spec(cls, spec: VitalSpec, rng: Optional[np.random.Generator] = None) -> "SimulatedValue":
        return cls(
            spec.initial,
            spec.minimum,
            spec.maximum,
            interval_sec=spec.interval_sec,
            step_range=spec.step_range,
            rng=rng,
        )

    def step(self) -> float:
        delta = float(self.rng.uniform(-self.step_range, self.step_range))
        self._current = float(np.clip(self._current + delta, self.minimum, self.maximum))
        self.value = round(self._current, 1)
        return self.value


class VitalsSimulator:
    """Dashboard vitals, each ticking on its own interval."""

    def __init__(self, specs: Iterable[VitalSpec] = DEFAULT_VITALS, *, seed: Optional[int] = None) -> None:
        rng = np.random.default_rng(seed)
        self.specs: Dict[str, VitalSpec] = {s.key: s for s in specs}
        self.values: Dict[str, SimulatedValue] = {
            key: SimulatedValue.from_spec(spec, rng) for key, spec in self.specs.items()
        }
        self._pending: Dict[str, float] = {key: 0.0 for key in self.specs}

    def snapshot(self) -> Dict[str, float]:
        return {key: sv.value for key, sv in self.values.items()}

    def advance(self, elapsed_sec: float) -> Dict[str, float]:
        if elapsed_sec < 0:
            raise ValueError("elapsed_sec must be >= 0")
        for key, sv in self.values.items():
            self._pending[key] += elapsed_sec
            while self._pending[key] >= sv.interval_sec:
                sv.step()
                self._pending[key] -= sv.interval_sec
        return self.snapshot()

    def trace(self, duration_sec: float, tick_sec: float = 1.0) -> pd.DataFrame:
        if tick_sec <= 0:
            raise ValueError("tick_sec must be positive")
        rows: List[Dict[str, float]] = [{"t": 0.0, **self.snapshot()}]
        steps = int(np.floor(duration_sec / tick_sec + 1e-9))
        for i in range(1, steps + 1):
            sample = self.advance(tick_sec)
            rows.append({"t": round(i * tick_sec, 3), **sample})
        df = pd.DataFrame(rows)
        if "heart_rate" in df.columns:
            df["hr_zone"] = df["heart_rate"].map(heart_rate_zone)
        return df
