"""
    Standard Workload Format (SWF) of the Parallel Workloads Archive.

    https://www.cs.huji.ac.il/labs/parallel/workload/swf.html

    Job lines hold 18 whitespace separated numbers, -1 marks a missing value:

         1 job number               7 used memory (KB/proc)   13 group id
         2 submit time (s)          8 requested processors    14 executable number
         3 wait time (s)            9 requested time (s)      15 queue number
         4 run time (s)            10 requested memory        16 partition number
         5 allocated processors    11 status                  17 preceding job number
         6 average cpu time used   12 user id                 18 think time (s)

    Header lines start with ';', e.g. '; MaxProcs: 1024'.
"""
from ..utils import is_finite_float, parse_long_number

NAME = "Standard Workload Format"
RESOLVES_PRECEDING = True

NUM_FIELDS = 18
COMMENT = ";"
MAX_PROCS_KEYS = ("MaxProcs", "MaxNodes")
MISSING = -1


def is_trace_line(line):
    if line is None or line.lstrip().startswith(COMMENT):
        return False
    fields = line.split()
    if len(fields) != NUM_FIELDS:
        return False
    if not all(is_finite_float(f) for f in fields):
        return False
    # Jobs without a run time cannot be replayed
    return float(fields[3]) >= 0


def metadata_collector(line, metadata):
    header = line.lstrip().lstrip(COMMENT).strip()
    key, sep, value = header.partition(":")
    if not sep or key.strip() not in MAX_PROCS_KEYS:
        return
    try:
        procs = parse_long_number(value)
    except ValueError:
        return
    # MaxProcs wins over MaxNodes when a header carries both
    if key.strip() == "MaxProcs" or metadata.max_proc_count <= 0:
        metadata.max_proc_count = procs


def _textual(value):
    return None if value == MISSING else str(value)


def create_job_from_line(line, job_creator, metadata):
    fields = line.split()
    try:
        values = [parse_long_number(f) for f in fields]
        job_id = str(values[0])
        submit_time = values[1]
        queue_time = max(values[2], 0)
        exec_time = values[3]
        allocated, requested = values[4], values[7]
        avg_cpu_time = float(fields[5])
        used_mem = values[6]
        user, group, executable = values[11], values[12], values[13]
        preceding_id, think_time = values[16], values[17]
    except (IndexError, ValueError):
        return None

    if allocated > 0:
        nprocs = allocated
    elif requested > 0:
        nprocs = requested
    else:
        nprocs = 1
    per_proc_cpu = avg_cpu_time / exec_time if avg_cpu_time > 0 and exec_time > 0 else -1
    per_proc_mem = used_mem if used_mem > 0 else -1
    preceding = None
    if preceding_id > 0:
        preceding = metadata.jobs_by_id.get(str(preceding_id))
    executable = "N/A" if executable == MISSING else str(executable)

    return job_creator(job_id, submit_time, queue_time, exec_time, nprocs, per_proc_cpu,
                       per_proc_mem, _textual(user), _textual(group), executable, preceding,
                       max(think_time, 0))
