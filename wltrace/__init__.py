"""
Workload trace producers for cluster and cloud simulators.
"""
from .errors import JobFactoryError, TraceFormatError, TraceGenerationError, TraceManagementError
from .formats import TraceFormat, TraceMetadata, get_trace_format
from .generator import GenericRandomTraceGenerator, RandomTraceParameters, RepetitiveRandomTraceGenerator
from .job import Job, resolve_job_creator
from .producer import TraceProducer
from .reader import TraceFileReader, TraceWindow

__all__ = [
    "Job",
    "resolve_job_creator",
    "TraceProducer",
    "TraceFileReader",
    "TraceWindow",
    "TraceFormat",
    "TraceMetadata",
    "get_trace_format",
    "GenericRandomTraceGenerator",
    "RepetitiveRandomTraceGenerator",
    "RandomTraceParameters",
    "TraceManagementError",
    "JobFactoryError",
    "TraceFormatError",
    "TraceGenerationError",
]
