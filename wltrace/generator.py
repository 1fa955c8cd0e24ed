"""
Module for generating random traces.

A random trace generator is configured through its parameters, then asked for jobs like any
other trace producer. Changing a parameter marks the previously generated trace as stale, the
trace is generated again on the next request. Until every parameter is set the generator is not
prepared and requesting jobs raises TraceManagementError.
"""
import sys
from typing import Callable

import numpy as np
from pydantic import BaseModel, ConfigDict

from wltrace.errors import TraceGenerationError, TraceManagementError
from wltrace.job import Job, resolve_job_creator
from wltrace.logger import get_logger
from wltrace.producer import TraceProducer
from wltrace.utils import SubParsers, draw_uniform, jobs_to_dataframe, pydantic_add_args, read_yaml
from wltrace.wltrace_config import wltrace_config

logger = get_logger("generator")

UNSET = -1


class RandomTraceParameters(BaseModel):
    """
    Characteristics of a random trace. A value below 0 leaves the parameter unset.
    """
    model_config = ConfigDict(validate_assignment=True, use_attribute_docstrings=True)

    job_num: int = UNSET
    """ Number of jobs to generate """
    max_total_procs: int = UNSET
    """ Number of processors the jobs of a parallel section may occupy together """
    parallel: int = UNSET
    """ Number of jobs in every parallel section """
    max_start_spread: int = UNSET
    """ Seconds over which the submissions of a parallel section are dispersed """
    exec_min: int = UNSET
    """ Shortest execution time of a job in seconds """
    exec_max: int = UNSET
    """ Upper bound (exclusive unless equal to exec_min) of a job's execution time """
    min_gap: int = UNSET
    """ Shortest idle period in seconds between two parallel sections """
    max_gap: int = UNSET
    """ Upper bound (exclusive unless equal to min_gap) of the idle period """
    min_node_procs: int = UNSET
    """ Fewest processors used by a single job """
    max_node_procs: int = UNSET
    """ Upper bound (exclusive unless equal to min_node_procs) of a job's processors """
    submit_start: int = 0
    """ Time at which the first parallel section starts """


def _parameter(name: str) -> property:
    """Property forwarding to the generator's parameters, setting it marks the trace stale."""
    def fget(self):
        return getattr(self.params, name)

    def fset(self, value):
        setattr(self.params, name, value)
        self._stale = True

    return property(fget, fset, doc=RandomTraceParameters.model_fields[name].description)


class GenericRandomTraceGenerator(TraceProducer):
    """
    Base of the random trace generators. Keeps the generated trace, the random source and the
    parameters every generator needs: the number of jobs and the total processor count.

    Subclasses implement generate_jobs() and extend is_prepared() with their own parameters.
    """
    required_parameters = ("job_num", "max_total_procs")

    job_num = _parameter("job_num")
    max_total_procs = _parameter("max_total_procs")

    def __init__(self, job_creator: Callable = Job, seed: int | None = None,
                 params: RandomTraceParameters | None = None):
        self.job_creator = resolve_job_creator(job_creator)
        self.params = params.model_copy() if params is not None else RandomTraceParameters()
        self.seed = wltrace_config.seed if seed is None else seed
        self._generated: list = []
        self._cursor = 0

    @property
    def seed(self) -> int | None:
        """ Seed of the random source, setting it restarts the source """
        return self._seed

    @seed.setter
    def seed(self, seed: int | None):
        self._seed = seed
        self.rng = np.random.default_rng(seed)
        self._stale = True

    def unset_parameters(self) -> list[str]:
        return [name for name in self.required_parameters if getattr(self.params, name) < 0]

    def is_prepared(self) -> bool:
        """ True once every parameter required for generation is set """
        return not self.unset_parameters()

    def regen_jobs(self) -> list:
        """
        Generate a new trace with the current parameters.

        Raises
        ------
        TraceManagementError
            If the generator is not prepared.
        TraceGenerationError
            If generation fails, the previous trace is kept in that case.
        """
        if not self.is_prepared():
            raise TraceManagementError(
                f"{type(self).__name__} is not prepared, unset parameters: "
                f"{', '.join(self.unset_parameters())}")
        self._generated = self.generate_jobs()
        self._cursor = 0
        self._stale = False
        return list(self._generated)

    def generate_jobs(self) -> list:
        raise NotImplementedError

    def get_all_jobs(self) -> list:
        if self._stale:
            self.regen_jobs()
        return list(self._generated)

    def get_jobs(self, num: int) -> list:
        if num < 0:
            raise ValueError(f"num must not be negative, got {num}")
        if self._stale:
            self.regen_jobs()
        jobs = self._generated[self._cursor:self._cursor + num]
        self._cursor += len(jobs)
        return jobs


class RepetitiveRandomTraceGenerator(GenericRandomTraceGenerator):
    """
    Generates a trace of repeating parallel sections.

    Every section holds `parallel` jobs submitted within max_start_spread seconds of the section's
    start. Execution times and processor counts are drawn uniformly from their ranges, processor
    counts are capped by what is left of max_total_procs in the section. The next section starts
    when the longest job of the previous one completes, plus a gap drawn from [min_gap, max_gap).

    Note: when a section has used up max_total_procs, its remaining jobs still get 1 processor
    each, so a section can exceed max_total_procs by one processor per such job.
    """
    required_parameters = GenericRandomTraceGenerator.required_parameters + (
        "parallel", "max_start_spread", "exec_min", "exec_max",
        "min_gap", "max_gap", "min_node_procs", "max_node_procs",
    )

    parallel = _parameter("parallel")
    max_start_spread = _parameter("max_start_spread")
    exec_min = _parameter("exec_min")
    exec_max = _parameter("exec_max")
    min_gap = _parameter("min_gap")
    max_gap = _parameter("max_gap")
    min_node_procs = _parameter("min_node_procs")
    max_node_procs = _parameter("max_node_procs")
    submit_start = _parameter("submit_start")

    def generate_jobs(self) -> list:
        p = self.params
        logger.info("Repetitive random trace generator starts with parameters (JN: %d, parallel: %d, "
                    "startSpr: %d, exec: %d-%d, gap: %d-%d, nodeprocs: %d-%d, totalProcs: %d)",
                    p.job_num, p.parallel, p.max_start_spread, p.exec_min, p.exec_max,
                    p.min_gap, p.max_gap, p.min_node_procs, p.max_node_procs, p.max_total_procs)
        try:
            exec_space = p.exec_max - p.exec_min
            gap_space = p.max_gap - p.min_gap
            node_space = p.max_node_procs - p.min_node_procs
            jobs = []
            section_start = p.submit_start
            for _ in range(p.job_num // p.parallel):
                used_procs = 0
                current_max_time = section_start
                for _ in range(p.parallel):
                    submit_time = section_start + draw_uniform(self.rng, p.max_start_spread)
                    nprocs = p.min_node_procs + draw_uniform(self.rng, node_space)
                    nprocs = min(p.max_total_procs - used_procs, nprocs)
                    nprocs = 1 if nprocs <= 0 else nprocs
                    exec_time = p.exec_min + draw_uniform(self.rng, exec_space)
                    used_procs += nprocs
                    jobs.append(self.job_creator(None, submit_time, 0, exec_time, nprocs, -1, -1,
                                                 "", "", "", None, 0))
                    current_max_time = max(current_max_time, submit_time + exec_time)
                section_start = current_max_time + p.min_gap + draw_uniform(self.rng, gap_space)
        except Exception as e:
            raise TraceGenerationError(f"generating the random trace failed: {e!r}") from e
        logger.debug("generated %d jobs, last section ends before %d", len(jobs), section_start)
        return jobs


class GenerateArgs(RandomTraceParameters):
    seed: int | None = None
    """ Set RNG seed for a reproducible trace """
    verbose: bool = False
    """ Enable debug logs """


shortcuts = {
    "job-num": "n",
    "parallel": "p",
    "verbose": "v",
}


def run_generate_add_parser(subparsers: SubParsers):
    parser = subparsers.add_parser("generate", description="""
        Generates a random trace of repeating parallel sections and prints it.
    """)
    parser.add_argument("config_file", nargs="?", default=None, help="""
        YAML config file, can be used to configure the generator instead of using CLI
        flags. Pass "-" to read from stdin.
    """)
    model_validate = pydantic_add_args(parser, GenerateArgs, model_config={
        "cli_shortcuts": shortcuts,
    })
    parser.set_defaults(impl=lambda args: run_generate(model_validate(args, read_yaml(args.config_file))))


def run_generate(generate_args: GenerateArgs):
    if generate_args.verbose:
        get_logger().setLevel("DEBUG")
    params = RandomTraceParameters.model_validate(
        generate_args.model_dump(include=set(RandomTraceParameters.model_fields)))
    generator = RepetitiveRandomTraceGenerator(seed=generate_args.seed, params=params)
    if not generator.is_prepared():
        print(f"Missing parameters: {', '.join(generator.unset_parameters())}")
        sys.exit(1)
    jobs = generator.get_all_jobs()
    print(jobs_to_dataframe(jobs).to_string())
    print(f"{len(jobs)} jobs")
