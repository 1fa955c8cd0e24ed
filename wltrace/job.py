import inspect
from typing import Callable

from wltrace.errors import JobFactoryError

"""
Note: every trace producer creates its jobs through a job creator, a callable taking the
parameters listed in JOB_PARAMETERS positionally. Job is the default creator, simulators plug in
their own record types by passing any class or function with the same parameter list.
"""

JOB_PARAMETERS = (
    "id",
    "submit_time",
    "queue_time",
    "exec_time",
    "nprocs",
    "per_proc_cpu",
    "per_proc_mem",
    "user",
    "group",
    "executable",
    "preceding",
    "delay_after",
)


class Job:
    """Represents a single unit of work in a workload trace.

    Times are in seconds. per_proc_cpu of -1 means the job runs at full speed on its processors,
    per_proc_mem of -1 means the memory demand is unknown. preceding refers to another job of the
    same trace which has to complete (plus delay_after seconds) before this one is submitted.
    """

    def __init__(self, id, submit_time, queue_time, exec_time, nprocs, per_proc_cpu,
                 per_proc_mem, user, group, executable, preceding, delay_after):
        if exec_time < 0:
            raise ValueError(f"exec_time must not be negative, got {exec_time}")
        if nprocs < 1:
            raise ValueError(f"nprocs must be at least 1, got {nprocs}")
        self.id = id
        # Times:
        self.submit_time = submit_time
        self.queue_time = queue_time
        self.exec_time = exec_time
        self.delay_after = delay_after
        # Resources:
        self.nprocs = nprocs
        self.per_proc_cpu = per_proc_cpu
        self.per_proc_mem = per_proc_mem
        # Ownership:
        self.user = user
        self.group = group
        self.executable = executable
        self.preceding = preceding

    def __repr__(self):
        """Return a string representation of the job."""
        preceding = None if self.preceding is None else getattr(self.preceding, "id", "?")
        return (f"Job(id={self.id}, submit_time={self.submit_time}, "
                f"queue_time={self.queue_time}, exec_time={self.exec_time}, "
                f"nprocs={self.nprocs}, per_proc_cpu={self.per_proc_cpu}, "
                f"per_proc_mem={self.per_proc_mem}, user={self.user}, group={self.group}, "
                f"executable={self.executable}, preceding={preceding}, "
                f"delay_after={self.delay_after})")

    @property
    def end_time(self):
        """Time at which the job completes if it starts right after its queue time."""
        return self.submit_time + self.queue_time + self.exec_time

    def to_dict(self):
        """ Return job info dictionary, the preceding job is referred to by its id """
        info = {name: getattr(self, name) for name in JOB_PARAMETERS}
        if self.preceding is not None:
            info['preceding'] = getattr(self.preceding, "id", None)
        return info


def resolve_job_creator(job_creator: Callable) -> Callable:
    """
    Checks that job_creator can be called with the job parameter list and returns it.

    Raises
    ------
    JobFactoryError
        If job_creator is not callable, has no introspectable signature, or its signature does
        not accept the twelve job parameters positionally.
    """
    if not callable(job_creator):
        raise JobFactoryError(f"job creator {job_creator!r} is not callable")
    try:
        signature = inspect.signature(job_creator)
    except (TypeError, ValueError) as e:
        raise JobFactoryError(f"cannot inspect job creator {job_creator!r}: {e}") from e
    try:
        signature.bind(*JOB_PARAMETERS)
    except TypeError as e:
        raise JobFactoryError(
            f"job creator {getattr(job_creator, '__name__', job_creator)!r} does not accept "
            f"({', '.join(JOB_PARAMETERS)}): {e}") from e
    return job_creator
