from __future__ import annotations

import argparse
import json
from dataclasses import asdict, dataclass

import numpy as np


@dataclass
class Reading:
    cowId: str
    temperature: float
    motionChange: float
    pitch: float
    roll: float
    humidity: float
    deviceId: str
    batteryLevel: float


def generate(*, cows: int = 5, readings_per_cow: int = 12, seed: int = 7, sick_fraction: float = 0.2) -> list[Reading]:
    rng = np.random.default_rng(seed)
    n_sick = int(round(cows * sick_fraction))

    out: list[Reading] = []
    for c in range(cows):
        cow_id = f"C{c + 1:03d}"
        sick = c < n_sick

        base_temp = 40.8 if sick else 38.5
        base_motion = 6.0 if sick else 45.0
        temperature = base_temp + rng.normal(0, 0.3, size=readings_per_cow)
        motion = np.clip(base_motion + rng.normal(0, 8.0, size=readings_per_cow), 0.0, None)
        pitch = rng.normal(0, 10.0, size=readings_per_cow)
        roll = rng.normal(0, 10.0, size=readings_per_cow)
        humidity = np.clip(60.0 + rng.normal(0, 5.0, size=readings_per_cow), 0.0, 100.0)
        battery = np.linspace(100.0, 100.0 - readings_per_cow * 0.5, readings_per_cow)

        for i in range(readings_per_cow):
            out.append(
                Reading(
                    cowId=cow_id,
                    temperature=round(float(temperature[i]), 2),
                    motionChange=round(float(motion[i]), 1),
                    pitch=round(float(pitch[i]), 1),
                    roll=round(float(roll[i]), 1),
                    humidity=round(float(humidity[i]), 1),
                    deviceId=f"ESP32-{cow_id}",
                    batteryLevel=round(float(battery[i]), 1),
                )
            )

    return out


def main() -> None:
    p = argparse.ArgumentParser()
    p.add_argument("--cows", type=int, default=5)
    p.add_argument("--readings-per-cow", type=int, default=12)
    p.add_argument("--seed", type=int, default=7)
    args = p.parse_args()

    for r in generate(cows=args.cows, readings_per_cow=args.readings_per_cow, seed=args.seed):
        print(json.dumps(asdict(r)))


if __name__ == "__main__":
    main()
