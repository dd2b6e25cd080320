"""Exceptions raised by the filter.

All of them describe local conditions: the offending input is skipped and the
filter keeps running. `FusionEngine` catches them and reports them as warnings.
"""


class FusionError(Exception):
    """Base class for filter exceptions."""


class RejectedFix(FusionError):
    """Position fix is not accepted (low quality or bad time synchronization)."""


class InitializationFailure(FusionError):
    """Static alignment can't be done with the buffered IMU data."""


class OutOfOrderSample(FusionError):
    """IMU sample has a timestamp not greater than the current filter time."""


class NumericalDegeneracy(FusionError):
    """Innovation covariance is not positive definite."""
