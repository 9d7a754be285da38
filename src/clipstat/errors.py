"""Exception types raised by the statistics core."""


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an argument outside an operation's contract.

    Data-quality degeneracies (all-blank input, zero spread, a poorly
    symmetric mode, an outlier scan that finds nothing) never raise; they are
    reported through NaN fields or ``None`` results instead.
    """


__all__ = ["InvalidArgumentError"]
