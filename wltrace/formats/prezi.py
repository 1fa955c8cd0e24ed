"""
    Prezi web request traces.

    Every job line holds four fields separated by single spaces, trailing whitespace is ignored:

        <arrival time s> <duration s, 1/1000 precision> <job id> <url|default|export>

    Anything else is metadata. A metadata line mentioning "Processors" declares the processor
    count of the traced system in its last field.
"""
from ..utils import is_int, is_finite_float, parse_long_number

NAME = "Prezi format"

EXECUTABLES = ("url", "default", "export")
PER_PROC_MEM = 512


def is_trace_line(line):
    if line is None:
        return False
    fields = line.rstrip().split(" ")
    if len(fields) != 4:
        return False
    arrival, duration, job_id, executable = fields
    if not is_int(arrival):
        return False
    # Durations are truncated to whole seconds, so they have to be finite and not negative
    if not is_finite_float(duration) or float(duration) < 0:
        return False
    if not job_id or any(c.isspace() for c in job_id):
        return False
    return executable in EXECUTABLES


def metadata_collector(line, metadata):
    if line is None or "Processors" not in line:
        return
    fields = line.split()
    try:
        metadata.max_proc_count = parse_long_number(fields[-1])
    except (ValueError, IndexError):
        pass  # no processor count on this line


def create_job_from_line(line, job_creator, metadata):
    fields = line.rstrip().split(" ")
    try:
        job_id = fields[2]
        submit_time = int(fields[0])
        exec_time = int(float(fields[1]))
        executable = fields[3]
    except IndexError:
        return None
    return job_creator(job_id, submit_time, 0, exec_time, 1, -1, PER_PROC_MEM,
                       None, None, executable, None, 0)
