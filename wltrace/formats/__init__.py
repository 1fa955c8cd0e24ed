"""
Trace file formats.

Every module of this package describes one line oriented trace format and is itself the plug-in
handed to wltrace.reader.TraceFileReader: a NAME used in diagnostics plus the three operations of
the TraceFormat protocol. Formats are looked up by module name, e.g. get_trace_format("swf").
"""
import importlib
from dataclasses import dataclass, field
from typing import Callable, Protocol

from wltrace.errors import TraceFormatError

FORMAT_OPERATIONS = ("is_trace_line", "metadata_collector", "create_job_from_line")


@dataclass
class TraceMetadata:
    """Aggregate state collected from the non job lines of a trace file."""
    max_proc_count: int = 0
    """ Processor count declared by the trace, 0 if the trace does not declare one """
    metadata_lines: int = 0
    jobs_by_id: dict = field(default_factory=dict)
    """ Jobs produced so far by id, filled only for formats setting RESOLVES_PRECEDING """


class TraceFormat(Protocol):
    """The operations a trace format provides. Format modules satisfy this protocol."""
    NAME: str
    RESOLVES_PRECEDING: bool
    """ Optional. When True the reader records every job in TraceMetadata.jobs_by_id """

    def is_trace_line(self, line: str | None) -> bool:
        """Decide whether line holds a job. Must return False instead of raising."""
        ...

    def metadata_collector(self, line: str, metadata: TraceMetadata) -> None:
        """Extract aggregate information from a line that is not a job."""
        ...

    def create_job_from_line(self, line: str, job_creator: Callable,
                             metadata: TraceMetadata) -> object | None:
        """Build the job of a line accepted by is_trace_line, None to skip the line."""
        ...


def get_trace_format(trace_format: "TraceFormat | str") -> TraceFormat:
    """
    Resolve a trace format by name, or check that an object provides the format operations.

    Raises
    ------
    TraceFormatError
        If no format module has the given name, or the format lacks NAME or an operation.
    """
    if isinstance(trace_format, str):
        module_name = f"wltrace.formats.{trace_format}"
        try:
            trace_format = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            if e.name != module_name:
                raise
            raise TraceFormatError(f"unknown trace format {trace_format!r}") from e
    missing = [op for op in ("NAME", *FORMAT_OPERATIONS) if not hasattr(trace_format, op)]
    if missing:
        raise TraceFormatError(f"{trace_format!r} is not a trace format, missing: {', '.join(missing)}")
    return trace_format
