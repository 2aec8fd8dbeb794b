"""Exception hierarchy for kernel computation.

Configuration and index errors are raised before any propagation step runs,
so a caller never receives a partially computed kernel.
"""


class KernelError(Exception):
    """Base class for all coinciding walk kernel errors."""


class InvalidConfiguration(KernelError, ValueError):
    """Raised when a parameter or input shape is outside its valid domain."""


class IndexOutOfRange(InvalidConfiguration, IndexError):
    """Raised when a node id or class label falls outside its valid range."""
