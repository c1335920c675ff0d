"""Use cases for the Solis telemetry engine."""

from .poll_sequencer import PollSequencer

__all__ = ["PollSequencer"]
