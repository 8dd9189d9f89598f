"""Clock/Tick Source for elapsed-time state."""

from resus.clock.tick_source import ClockState, TickListener, TickSource

__all__ = ["ClockState", "TickListener", "TickSource"]
