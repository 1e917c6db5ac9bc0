"""
Screen Shake
=============
Trauma-driven camera jitter.

Trauma is added by damage and bleeds off every tick with a fixed blend
factor (a one-pole low-pass). The blend is per tick, not per second, so
the shake dies out faster at higher frame rates.
"""

import math
from dataclasses import dataclass
from typing import Tuple

from .config import ShakeConfig
from .geometry import lerp


@dataclass
class ScreenShake:
    """Screen shake state plus its tuning."""
    config: ShakeConfig
    trauma: float = 0.0
    elapsed: float = 0.0

    def add_trauma(self, amount: float) -> None:
        if amount > 0:
            self.trauma += amount

    def reset(self) -> None:
        self.trauma = 0.0
        self.elapsed = 0.0

    def update(self, dt: float) -> Tuple[float, float]:
        """Decay trauma one tick and return this tick's (x, y) camera offset."""
        if self.trauma <= 0:
            self.elapsed = 0.0
            return 0.0, 0.0

        self.trauma = lerp(self.trauma, 0.0, self.config.decay_rate)
        if self.trauma < self.config.cutoff:
            self.reset()
            return 0.0, 0.0

        self.elapsed += dt
        return (
            self.trauma * math.sin(2 * math.pi * self.config.frequency_x * self.elapsed),
            self.trauma * math.sin(2 * math.pi * self.config.frequency_y * self.elapsed),
        )
