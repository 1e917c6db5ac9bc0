"""
Error Types
============
Invariant violations raised by the simulation core.
"""


class SimulationError(Exception):
    """Base class for all simulation errors."""


class InvalidParameterError(SimulationError, ValueError):
    """A radius, speed, acceleration or ranged value is out of bounds."""


class ConfigError(InvalidParameterError):
    """A GameConfig failed validation."""


class StateError(SimulationError, RuntimeError):
    """The state machine was driven with an event its current state forbids."""
