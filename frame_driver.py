"""
Fixed-timestep driver shared by every demo.

Decouples the rendering frame rate from the simulation rate: wall-clock time
is accumulated and the simulation is stepped a whole number of times per
rendered frame, while the render callback runs exactly once per frame.
"""

from typing import Callable, Optional

import simulation_constants as constants


class FixedTimestepDriver:
    """
    Runs `simulate` at a constant rate and `render` once per frame.

    Parameters
    ----------
    simulate : Callable[[], None]
        Advances the simulation by one `simulation_dt`.
    render : Callable[[], None]
        Draws the current state. Called once per frame, even while paused.
    simulation_dt : float
        Simulated seconds per `simulate` call.
    max_frame_dt : float
        Upper bound for the wall-clock time credited to a single frame, so that
        a stalled window does not trigger a burst of catch-up steps.
    """

    def __init__(
        self,
        simulate: Callable[[], None],
        render: Callable[[], None],
        simulation_dt: float = constants.DEFAULT_SIMULATION_DT,
        max_frame_dt: float = constants.DEFAULT_MAX_FRAME_DT
    ):
        self.simulate = simulate
        self.render = render
        self.simulation_dt = simulation_dt
        self.max_frame_dt = max_frame_dt

        self.accumulated_time: float = 0.0
        self.frame_dt: float = 0.0
        self.frame_count: int = 0  #: Rendered frames.
        self.step_count: int = 0   #: Total simulate() calls.

        self._last_frame_time: Optional[float] = None
        self._paused: bool = False
        self._just_resumed: bool = False

    @property
    def paused(self) -> bool:
        return self._paused

    def pause(self) -> None:
        """Freeze the accumulator. Frames keep rendering."""
        self._paused = True

    def resume(self) -> None:
        """Unfreeze. The time spent paused is discarded, not fast-forwarded."""
        self._just_resumed = True
        self._paused = False

    def toggle_pause(self) -> None:
        if self._paused:
            self.resume()
        else:
            self.pause()

    def do_frame(self, now: float) -> int:
        """
        Process one rendered frame at wall-clock time `now` (seconds).

        Returns
        -------
        int
            Number of simulate() calls performed for this frame.
        """
        if self._last_frame_time is None:
            frame_dt = 0.0
        else:
            frame_dt = now - self._last_frame_time
        self._last_frame_time = now

        if frame_dt > self.max_frame_dt:
            frame_dt = self.max_frame_dt

        if self._just_resumed:
            frame_dt = 0.0
            self._just_resumed = False

        self.frame_dt = frame_dt

        steps_this_frame = 0
        if not self._paused:
            self.accumulated_time += frame_dt
            while self.accumulated_time >= self.simulation_dt:
                self.simulate()
                self.accumulated_time -= self.simulation_dt
                steps_this_frame += 1

        self.step_count += steps_this_frame
        self.render()
        self.frame_count += 1
        return steps_this_frame
