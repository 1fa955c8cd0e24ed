"""
Generic reader for line oriented trace files.

The reader knows nothing about a file's syntax. It streams the file top to bottom and asks a trace
format, see wltrace.formats, three things: is this line a job, what metadata does this other line
hold, and which job does this job line describe. Jobs are produced in file order within the
configured window of trace lines.
"""
import itertools
from pathlib import Path
from typing import Callable, Iterator

from pydantic import BaseModel, model_validator
from tqdm import tqdm

from wltrace.formats import TraceFormat, TraceMetadata, get_trace_format
from wltrace.job import Job, resolve_job_creator
from wltrace.logger import get_logger
from wltrace.producer import TraceProducer
from wltrace.utils import ExpandedPath, SubParsers, jobs_to_dataframe, pydantic_add_args, read_yaml

logger = get_logger("reader")


class TraceWindow(BaseModel):
    """
    Index range [start, stop) over the trace lines of a file. Metadata lines are not counted.
    With allow_reading_further the stop bound is ignored and the rest of the file is read.
    """
    start: int = 0
    stop: int
    allow_reading_further: bool = False

    @model_validator(mode="after")
    def _validate_bounds(self):
        if self.start < 0:
            raise ValueError(f"window start must not be negative, got {self.start}")
        if self.stop < self.start:
            raise ValueError(f"window stop {self.stop} is before its start {self.start}")
        return self

    def includes(self, index: int) -> bool:
        return index >= self.start and (self.allow_reading_further or index < self.stop)

    def exhausted(self, index: int) -> bool:
        """True once no trace line at or after index can be part of the window."""
        return not self.allow_reading_further and index >= self.stop


class TraceFileReader(TraceProducer):
    """
    Trace producer reading jobs from a file.

    Parameters
    ----------
    trace_format : module or str
        The format of the file, either a format module or its name in wltrace.formats.
    file_name : str or Path
        The trace file.
    start : int
        Index of the first trace line to produce.
    stop : int
        Index of the trace line before which production stops.
    allow_reading_further : bool
        Ignore stop and produce every trace line from start to the end of the file.
    job_creator : callable
        Builds the jobs, see wltrace.job.resolve_job_creator.
    progress : bool
        Show a progress bar while reading.
    """

    def __init__(self, trace_format: TraceFormat | str, file_name: str | Path, start: int, stop: int,
                 allow_reading_further: bool = False, job_creator: Callable = Job,
                 progress: bool = False):
        trace_format = get_trace_format(trace_format)
        self.trace_format = trace_format
        self.trace_kind = trace_format.NAME
        self.file_name = Path(file_name)
        self.window = TraceWindow(start=start, stop=stop, allow_reading_further=allow_reading_further)
        self.job_creator = resolve_job_creator(job_creator)
        self.progress = progress
        self.metadata = TraceMetadata()
        self._pending: Iterator | None = None

    def __repr__(self):
        return (f"TraceFileReader({self.trace_kind!r}, {str(self.file_name)!r}, "
                f"start={self.window.start}, stop={self.window.stop}, "
                f"allow_reading_further={self.window.allow_reading_further})")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    @property
    def max_proc_count(self) -> int:
        """ Processor count declared in the metadata read so far """
        return self.metadata.max_proc_count

    def _read_window(self) -> Iterator:
        self.metadata = TraceMetadata()
        trace_fmt = self.trace_format
        resolves_preceding = getattr(trace_fmt, "RESOLVES_PRECEDING", False)
        line_idx = 0
        produced = skipped = 0
        with open(self.file_name, "rt") as f:
            lines = tqdm(f, desc=f"Reading {self.trace_kind} trace", unit=" lines",
                         disable=not self.progress)
            for raw in lines:
                if self.window.exhausted(line_idx):
                    break
                line = raw.rstrip("\r\n")
                if not trace_fmt.is_trace_line(line):
                    self.metadata.metadata_lines += 1
                    trace_fmt.metadata_collector(line, self.metadata)
                    continue
                included = self.window.includes(line_idx)
                line_idx += 1
                if not included:
                    continue
                job = trace_fmt.create_job_from_line(line, self.job_creator, self.metadata)
                if job is None:
                    skipped += 1
                    logger.warning("%s: skipping trace line %d, no job could be created from %r",
                                   self.file_name, line_idx - 1, line)
                    continue
                job_id = getattr(job, "id", None)
                if resolves_preceding and job_id is not None:
                    self.metadata.jobs_by_id[job_id] = job
                produced += 1
                yield job
        logger.info("%s: produced %d jobs from %s (%d skipped, %d metadata lines)",
                    self.trace_kind, produced, self.file_name, skipped, self.metadata.metadata_lines)

    def get_all_jobs(self) -> list:
        """Read the file from its beginning and return every job of the window."""
        self.reset()
        return list(self._read_window())

    def get_jobs(self, num: int) -> list:
        """
        Return the next num jobs of the window, continuing where the previous call stopped.

        Fewer jobs are returned when the window or the file ends, an empty list afterwards.
        The file stays open between calls until the window is exhausted or close() is called.
        """
        if num < 0:
            raise ValueError(f"num must not be negative, got {num}")
        if self._pending is None:
            self._pending = self._read_window()
        return list(itertools.islice(self._pending, num))

    def reset(self):
        """Release the open file, the next get_jobs call starts from the beginning again."""
        self.close()

    def close(self):
        if self._pending is not None:
            self._pending.close()
            self._pending = None


class ReadArgs(BaseModel):
    trace_format: str = "prezi"
    """ Format of the trace file, one of the modules in wltrace.formats """
    trace_file: ExpandedPath
    """ Trace file to read """
    start: int = 0
    """ Index of the first trace line to produce """
    stop: int = 1000
    """ Index of the trace line before which reading stops """
    allow_reading_further: bool = False
    """ Ignore --stop and read until the end of the file """
    verbose: bool = False
    """ Show progress and debug logs """


shortcuts = {
    "trace-format": "t",
    "trace-file": "f",
    "verbose": "v",
}


def run_read_add_parser(subparsers: SubParsers):
    parser = subparsers.add_parser("read", description="""
        Reads a window of jobs from a trace file and prints them.
    """)
    parser.add_argument("config_file", nargs="?", default=None, help="""
        YAML config file, can be used to configure the reader instead of using CLI
        flags. Pass "-" to read from stdin.
    """)
    model_validate = pydantic_add_args(parser, ReadArgs, model_config={
        "cli_shortcuts": shortcuts,
    })
    parser.set_defaults(impl=lambda args: run_read(model_validate(args, read_yaml(args.config_file))))


def run_read(read_args: ReadArgs):
    if read_args.verbose:
        get_logger().setLevel("DEBUG")
    with TraceFileReader(read_args.trace_format, read_args.trace_file,
                         read_args.start, read_args.stop,
                         allow_reading_further=read_args.allow_reading_further,
                         progress=read_args.verbose) as reader:
        jobs = reader.get_all_jobs()
    print(jobs_to_dataframe(jobs).to_string())
    print(f"{len(jobs)} jobs, declared processors: {reader.max_proc_count}")
