"""
Playback cursor over a recorded step log.

This is the controller side of the viewer without any clock: the caller decides
when to call `tick()` (every `interval_ms`), and reads `current` to render.

Controls mirror the viewer panel:
- play/pause, step back, step forward, reset to the first step
- interval slider: 100..2000 ms in steps of 100 (default 500)
- array size slider: 10..50 in steps of 5 (default 20), used by `generate_new`
- strategy selector, applied to the next `generate_new` / `use_custom`

`generate_new` and `use_custom` are the only places that run the engine, once
per call; every other control only moves the cursor over the loaded log.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Union

import numpy as np

from sorttrace.datasets import generate_random_array
from sorttrace.engine import Step, Strategy, sort

__all__ = ["PlaybackCursor", "INTERVAL_RANGE_MS", "ARRAY_SIZE_RANGE"]

# (min, max, step) for the two sliders
INTERVAL_RANGE_MS = (100, 2000, 100)
ARRAY_SIZE_RANGE = (10, 50, 5)


class PlaybackCursor:
    def __init__(
        self,
        steps: Sequence[Step],
        interval_ms: int = 500,
        array_size: int = 20,
        strategy: Union[Strategy, str] = Strategy.HYBRID,
    ) -> None:
        self._steps: Sequence[Step] = ()
        self._index = 0
        self._playing = False
        self._interval_ms = 0
        self._array_size = 0
        self._strategy = Strategy.parse(strategy)
        self.set_interval(interval_ms)
        self.set_array_size(array_size)
        self.load(steps)

    @classmethod
    def from_random(
        cls,
        array_size: int = 20,
        strategy: Union[Strategy, str] = Strategy.HYBRID,
        rng: Optional[np.random.Generator] = None,
        interval_ms: int = 500,
    ) -> "PlaybackCursor":
        """Start the viewer the way it opens: on a freshly generated array."""
        _check_slider("array_size", array_size, ARRAY_SIZE_RANGE)
        values = generate_random_array(array_size, rng=rng)
        return cls(sort(values, strategy), interval_ms, array_size, strategy)

    # ------------------------- state ------------------------- #

    @property
    def index(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._steps)

    @property
    def current(self) -> Step:
        return self._steps[self._index]

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def at_end(self) -> bool:
        return self._index == len(self._steps) - 1

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def array_size(self) -> int:
        return self._array_size

    @property
    def strategy(self) -> Strategy:
        return self._strategy

    @property
    def values(self) -> List[int]:
        """Input of the loaded run (its first step's array)."""
        return list(self._steps[0].array)

    # ------------------------- new runs ------------------------- #

    def generate_new(self, rng: Optional[np.random.Generator] = None) -> Sequence[Step]:
        """Sort a fresh random array of `array_size` values and show it from the start."""
        values = generate_random_array(self._array_size, rng=rng)
        steps = sort(values, self._strategy)
        self.load(steps)
        return steps

    def use_custom(self, values: Sequence[int]) -> Sequence[Step]:
        """
        Sort caller-supplied values (e.g. from `parse_custom_array`) and show them.

        Raises
        ------
        ValueError
            If `values` is empty; the engine is not run.
        """
        if len(values) == 0:
            raise ValueError("custom array must contain at least one integer")
        steps = sort(values, self._strategy)
        self.load(steps)
        return steps

    def set_strategy(self, strategy: Union[Strategy, str]) -> None:
        """Select the strategy for the next run; the loaded log is left as is."""
        self._strategy = Strategy.parse(strategy)

    # ------------------------- controls ------------------------- #

    def load(self, steps: Sequence[Step]) -> None:
        """Show a freshly generated run from its first step, paused."""
        if len(steps) == 0:
            raise ValueError("cannot play back an empty step log")
        self._steps = steps
        self.reset()

    def reset(self) -> None:
        self._index = 0
        self._playing = False

    def toggle_play(self) -> bool:
        """Flip play/pause; playing from the last step restarts at the first one."""
        if not self._playing and self.at_end:
            self._index = 0
        self._playing = not self._playing
        return self._playing

    def tick(self) -> bool:
        """Advance one step if playing. Returns True when the cursor moved."""
        if not self._playing:
            return False
        if self.at_end:
            self._playing = False
            return False
        self._index += 1
        if self.at_end:
            self._playing = False
        return True

    # At a boundary the manual steps are no-ops and leave playback running.

    def step_forward(self) -> bool:
        if self.at_end:
            return False
        self._index += 1
        self._playing = False
        return True

    def step_back(self) -> bool:
        if self._index == 0:
            return False
        self._index -= 1
        self._playing = False
        return True

    def seek(self, index: int) -> None:
        if not (0 <= index < len(self._steps)):
            raise IndexError(f"step {index} outside [0, {len(self._steps)})")
        self._index = index
        self._playing = False

    def set_interval(self, interval_ms: int) -> None:
        self._interval_ms = _check_slider("interval_ms", interval_ms, INTERVAL_RANGE_MS)

    def set_array_size(self, array_size: int) -> None:
        self._array_size = _check_slider("array_size", array_size, ARRAY_SIZE_RANGE)


def _check_slider(name: str, value: int, bounds: tuple) -> int:
    lo, hi, step = bounds
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an int; got {value!r}")
    if not (lo <= value <= hi) or (value - lo) % step != 0:
        raise ValueError(f"{name} must be in [{lo}, {hi}] in steps of {step}; got {value}")
    return value
