"""
Exceptions raised by the trace producers.

Line level problems (malformed trace lines, unparsable metadata) never surface as exceptions,
they are absorbed by the reader. Only configuration and construction problems reach the caller.
"""


class TraceManagementError(Exception):
    """A trace producer was asked for jobs before all of its parameters were set."""


class JobFactoryError(TypeError):
    """The job factory cannot be called with the fixed job parameter list."""


class TraceFormatError(ValueError):
    """Unknown trace format, or a format module missing one of its operations."""


class TraceGenerationError(RuntimeError):
    """Generating a random trace failed. The cause is chained."""
