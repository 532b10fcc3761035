"""Errors raised by the rebalancing engine.

Validation problems (mis-summed allocations, negative weights, unknown
symbols) are never raised; they come back as ``ValidationWarning`` data.
"""


class RebalancingError(Exception):
    """Base class for fatal engine errors."""


class ConfigurationError(RebalancingError, ValueError):
    """The request cannot be served as configured.

    Unknown strategy, empty target allocation, missing price data or
    invalid strategy parameters.
    """


class ComputationError(RebalancingError, ValueError):
    """The inputs make the computation undefined (e.g. zero portfolio value)."""
