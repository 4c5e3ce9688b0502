"""
Error and warning types raised by the PageRank engine.

Input problems are fatal and derive from ValueError. Non-convergence is
reported through the warnings module so the best-effort result still
reaches the caller.
"""


class InvalidWeightError(ValueError):
    """The adjacency matrix contains a negative weight."""


class EmptyGraphError(ValueError):
    """The graph has no nodes."""


class UnknownMethodError(ValueError):
    """The requested solver method is not registered."""


class InvalidConfigError(ValueError):
    """A PageRank option is outside its valid range."""


class MaxIterationsExceeded(UserWarning):
    """The iteration budget ran out before the convergence test passed."""


class ScheduleRangeWarning(UserWarning):
    """The iterative damping schedule was used with d outside (0, 0.5)."""
