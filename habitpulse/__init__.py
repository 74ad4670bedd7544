"""HabitPulse - temporal behavior analytics over a local activity log."""

__version__ = "0.1.0"
