"""
Common interface of everything that produces a trace for a scheduler under test.
"""


class TraceProducer:
    """
    Base class of trace producers.

    A producer hands out an ordered list of jobs, either all at once with get_all_jobs(), or
    piecewise with get_jobs(num). Jobs are built with the producer's job creator, see
    wltrace.job.resolve_job_creator.
    """

    def get_all_jobs(self) -> list:
        """Produce the complete trace, from its first job on."""
        raise NotImplementedError

    def get_jobs(self, num: int) -> list:
        """Produce at most num jobs that follow the ones handed out by the previous call."""
        raise NotImplementedError
