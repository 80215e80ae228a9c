"""
Error taxonomy for the control core.

Every error is a ValueError subclass so callers that already guard
argument problems with ``except ValueError`` keep working. None of
these is meant to abort a run:

- InvalidTopology: malformed layer-size list.
- TopologyMismatch: crossover between networks of different shape.
- InsufficientExperience: training requested before a full batch is
  stored. Skipped silently by the agent.
- NoFiniteOutput: every action value is NaN or infinite. The agent
  falls back to action 0.
- ConfigurationError: a configuration value is out of range.
"""


class NeuroControlError(ValueError):
    """Base class for all control-core errors."""


class InvalidTopology(NeuroControlError):
    """Raised when a network is built from an invalid layer-size list."""


class TopologyMismatch(NeuroControlError):
    """Raised when two networks with different shapes are combined."""


class InsufficientExperience(NeuroControlError):
    """Raised when fewer experiences are stored than a batch needs."""


class NoFiniteOutput(NeuroControlError):
    """Raised when a value vector has no finite entries."""


class ConfigurationError(NeuroControlError):
    """Raised when a configuration value fails validation."""
