"""Scratch-card reveal over a circular canvas.

The cover is a square canvas of side `diameter` masked to its inscribed
circle. Every drag sample erases a capsule (a thick round-capped segment from
the previous sample plus a disc at the current one). Only cells inside the
circle are counted, and a cell is sampled at its centre.

Rule of thumb:
- Erasure is one-directional, so progress never decreases.
- Input outside the circle is ignored, never rejected.
"""

from enum import Enum
from typing import Callable, List, Optional, Tuple

import numpy as np

Point = Tuple[float, float]

SCRATCH_SIZE = 280
REVEAL_THRESHOLD = 60.0
LINE_WIDTH = 50.0
BRUSH_RADIUS = 25.0
EDGE_INSET = 0.0


class RevealState(str, Enum):
    ACTIVE = "ACTIVE"
    REVEALED = "REVEALED"


class ScratchRevealEngine:
    """Erasure mask and reveal progress for one scratch session."""

    def __init__(
        self,
        diameter: int = SCRATCH_SIZE,
        reveal_threshold: float = REVEAL_THRESHOLD,
        line_width: float = LINE_WIDTH,
        brush_radius: float = BRUSH_RADIUS,
        inset: float = EDGE_INSET,
    ):
        if diameter <= 0:
            raise ValueError("diameter must be positive")
        self.diameter: int = int(diameter)
        self.reveal_threshold: float = float(reveal_threshold)
        self.line_width: float = float(line_width)
        self.brush_radius: float = float(brush_radius)
        self.center: float = self.diameter / 2
        self.radius: float = self.diameter / 2 - inset

        cell_centers = np.arange(self.diameter, dtype=np.float64) + 0.5
        # Indexed [y, x] like canvas image data.
        self._xs, self._ys = np.meshgrid(cell_centers, cell_centers)
        self._inside: np.ndarray = (
            (self._xs - self.center) ** 2 + (self._ys - self.center) ** 2
            <= self.radius**2
        )
        self._inside_count: int = int(self._inside.sum())
        self._erased: np.ndarray = np.zeros_like(self._inside)
        self._erased_count: int = 0

        self.state: RevealState = RevealState.ACTIVE
        self._listeners: List[Callable[[float], None]] = []
        self._last_point: Optional[Point] = None
        self._pressed: bool = False

    @property
    def progress(self) -> float:
        """Percentage of the circle that has been erased."""
        if self._inside_count == 0:
            return 0.0
        return self._erased_count / self._inside_count * 100

    @property
    def revealed(self) -> bool:
        return self.state is RevealState.REVEALED

    @property
    def erased_mask(self) -> np.ndarray:
        return self._erased.copy()

    def add_reveal_listener(self, callback: Callable[[float], None]) -> None:
        """Register a callback fired once with the progress that crossed the threshold."""
        self._listeners.append(callback)

    def recount(self) -> float:
        """Progress from a full count over the mask instead of the running count."""
        if self._inside_count == 0:
            return 0.0
        return int((self._erased & self._inside).sum()) / self._inside_count * 100

    def apply_stroke(self, from_point: Point, to_point: Point) -> float:
        """Erase the capsule between two drag samples.

        Args:
            from_point (Point): Previous sample in canvas coordinates
            to_point (Point): Current sample in canvas coordinates

        Returns:
            float: Progress percent after the stroke
        """
        if self.revealed:
            return self.progress

        stroke = self._segment_mask(from_point, to_point, self.line_width / 2)
        stroke |= self._disc_mask(to_point, self.brush_radius)
        newly_erased = stroke & self._inside & ~self._erased
        count = int(newly_erased.sum())
        if count:
            self._erased |= newly_erased
            self._erased_count += count

        progress = self.progress
        if progress >= self.reveal_threshold:
            self._reveal(progress)
        return progress

    def press(self, point: Point) -> None:
        self._last_point = point
        self._pressed = True

    def move(self, point: Point) -> float:
        """Apply a stroke from the last sample while the pointer is pressed."""
        if not self._pressed or self._last_point is None:
            return self.progress
        progress = self.apply_stroke(self._last_point, point)
        self._last_point = point
        return progress

    def release(self) -> None:
        self._pressed = False

    def _reveal(self, progress: float) -> None:
        self.state = RevealState.REVEALED
        self._pressed = False
        for callback in self._listeners:
            callback(progress)

    def _disc_mask(self, point: Point, radius: float) -> np.ndarray:
        x, y = point
        return (self._xs - x) ** 2 + (self._ys - y) ** 2 <= radius**2

    def _segment_mask(self, start: Point, end: Point, half_width: float) -> np.ndarray:
        ax, ay = start
        dx = end[0] - ax
        dy = end[1] - ay
        px = self._xs - ax
        py = self._ys - ay
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            return px**2 + py**2 <= half_width**2
        t = np.clip((px * dx + py * dy) / length_sq, 0.0, 1.0)
        return (px - t * dx) ** 2 + (py - t * dy) ** 2 <= half_width**2
