class WaveletError(ValueError):
    """Base class for contract violations raised by the wavelet tree."""


class OutOfRange(WaveletError, IndexError):
    """An index or position falls outside the valid bound of a node."""


class InvalidRange(WaveletError):
    """A quantile query with l > r or k outside [1, r - l + 1]."""


class DomainViolation(WaveletError):
    """A value handed to construction lies outside the tree's bounds."""


class EmptySequence(WaveletError):
    """Construction or bounds lookup over an empty sequence."""
