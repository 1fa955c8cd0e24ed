import pytest
from pydantic import ValidationError

from wltrace.errors import JobFactoryError, TraceGenerationError, TraceManagementError
from wltrace.generator import RandomTraceParameters, RepetitiveRandomTraceGenerator
from wltrace.wltrace_config import wltrace_config


def make_generator(seed=42, **overrides):
    params = dict(
        job_num=100, max_total_procs=64, parallel=10, max_start_spread=30,
        exec_min=60, exec_max=600, min_gap=10, max_gap=100,
        min_node_procs=1, max_node_procs=16,
    )
    params.update(overrides)
    gen = RepetitiveRandomTraceGenerator(seed=seed)
    for name, value in params.items():
        setattr(gen, name, value)
    return gen


def sections(jobs, parallel):
    return [jobs[i:i + parallel] for i in range(0, len(jobs), parallel)]


def test_concrete_scenario():
    gen = make_generator(parallel=2, exec_min=10, exec_max=10, min_gap=5, max_gap=5,
                         min_node_procs=1, max_node_procs=1, max_total_procs=10,
                         job_num=4, max_start_spread=0, submit_start=0)
    jobs = gen.get_all_jobs()
    assert len(jobs) == 4
    assert [j.submit_time for j in jobs] == [0, 0, 15, 15]
    assert all(j.exec_time == 10 for j in jobs)
    assert all(j.nprocs == 1 for j in jobs)
    job = jobs[0]
    assert job.id is None
    assert job.queue_time == 0
    assert job.per_proc_cpu == -1
    assert job.per_proc_mem == -1
    assert (job.user, job.group, job.executable) == ("", "", "")
    assert job.preceding is None
    assert job.delay_after == 0


def test_not_prepared():
    gen = RepetitiveRandomTraceGenerator(seed=1)
    assert not gen.is_prepared()
    with pytest.raises(TraceManagementError):
        gen.get_all_jobs()


def test_becomes_prepared_one_setter_at_a_time():
    gen = RepetitiveRandomTraceGenerator(seed=1)
    values = dict(job_num=6, max_total_procs=8, parallel=3, max_start_spread=0, exec_min=1,
                  exec_max=5, min_gap=0, max_gap=0, min_node_procs=1, max_node_procs=2)
    for name, value in values.items():
        assert not gen.is_prepared()
        # Incomplete configuration is not an error until jobs are requested
        setattr(gen, name, value)
        assert getattr(gen, name) == value
    assert gen.is_prepared()
    assert gen.unset_parameters() == []
    assert len(gen.get_all_jobs()) == 6


def test_unset_parameters_reported():
    gen = make_generator(exec_max=-1, min_gap=-5)
    assert gen.unset_parameters() == ["exec_max", "min_gap"]
    with pytest.raises(TraceManagementError, match="exec_max, min_gap"):
        gen.get_jobs(1)


def test_parameters_two_phase():
    params = RandomTraceParameters(job_num=8, max_total_procs=4, parallel=4, max_start_spread=5,
                                   exec_min=1, exec_max=3, min_gap=1, max_gap=2,
                                   min_node_procs=1, max_node_procs=2)
    gen = RepetitiveRandomTraceGenerator(seed=3, params=params)
    assert gen.is_prepared()
    assert len(gen.regen_jobs()) == 8
    # The generator works on its own copy
    gen.parallel = 2
    assert params.parallel == 4


def test_parameters_validated():
    with pytest.raises(ValidationError):
        RandomTraceParameters(parallel="many")
    gen = RepetitiveRandomTraceGenerator(seed=3)
    with pytest.raises(ValidationError):
        gen.exec_min = "short"


@pytest.mark.parametrize("job_num,parallel,expected", [
    (4, 2, 4),
    (10, 3, 9),
    (7, 7, 7),
    (5, 10, 0),
    (0, 1, 0),
    (1000, 7, 994),
])
def test_output_size(job_num, parallel, expected):
    gen = make_generator(job_num=job_num, parallel=parallel)
    assert len(gen.get_all_jobs()) == expected


@pytest.mark.parametrize("seed", range(5))
def test_ranges(seed):
    gen = make_generator(seed=seed, submit_start=1000)
    secs = sections(gen.get_all_jobs(), gen.parallel)
    # Lower bound of the current section's start, exact for the first one
    section_start = 1000
    for k, section in enumerate(secs):
        for job in section:
            assert section_start <= job.submit_time < section_start + gen.max_start_spread
            assert gen.exec_min <= job.exec_time < gen.exec_max
            assert 1 <= job.nprocs < gen.max_node_procs
        if k + 1 < len(secs):
            section_end = max(j.submit_time + j.exec_time for j in section)
            next_start = min(j.submit_time for j in secs[k + 1])
            assert section_end + gen.min_gap <= next_start
            section_start = next_start


@pytest.mark.parametrize("seed", range(5))
def test_processor_budget(seed):
    gen = make_generator(seed=seed, max_total_procs=20, parallel=8, min_node_procs=2,
                         max_node_procs=9)
    jobs = gen.get_all_jobs()
    for section in sections(jobs, gen.parallel):
        used = forced = 0
        for job in section:
            if used >= gen.max_total_procs:
                # Budget is gone, the job still gets a single processor
                assert job.nprocs == 1
                forced += 1
            else:
                assert job.nprocs <= gen.max_total_procs - used
            used += job.nprocs
        assert used <= gen.max_total_procs + forced


def test_budget_oversubscribed_by_forced_jobs():
    gen = make_generator(parallel=5, max_total_procs=2, min_node_procs=1, max_node_procs=1,
                         job_num=5)
    jobs = gen.get_all_jobs()
    assert [j.nprocs for j in jobs] == [1, 1, 1, 1, 1]


def test_zero_width_ranges_do_not_use_rng():
    gen = make_generator(max_start_spread=0, exec_min=5, exec_max=5, min_gap=3, max_gap=3,
                         min_node_procs=2, max_node_procs=2)
    state = gen.rng.bit_generator.state
    gen.get_all_jobs()
    assert gen.rng.bit_generator.state == state


def test_same_seed_same_trace():
    first = [j.to_dict() for j in make_generator(seed=9).get_all_jobs()]
    second = [j.to_dict() for j in make_generator(seed=9).get_all_jobs()]
    assert first == second


def test_default_seed_from_config(monkeypatch):
    monkeypatch.setattr(wltrace_config, "seed", 1234)
    first = make_generator(seed=None)
    second = make_generator(seed=None)
    assert first.seed == 1234
    assert [j.to_dict() for j in first.get_all_jobs()] == [j.to_dict() for j in second.get_all_jobs()]


def test_reseed_regenerates():
    gen = make_generator(seed=5)
    first = [j.to_dict() for j in gen.get_all_jobs()]
    # Cached until something changes
    assert [j.to_dict() for j in gen.get_all_jobs()] == first
    gen.seed = 5
    assert [j.to_dict() for j in gen.get_all_jobs()] == first


def test_setter_marks_trace_stale():
    gen = make_generator(exec_min=10, exec_max=10)
    assert {j.exec_time for j in gen.get_all_jobs()} == {10}
    gen.exec_min = 20
    gen.exec_max = 20
    assert {j.exec_time for j in gen.get_all_jobs()} == {20}


def test_submit_start_not_moved_by_generation():
    gen = make_generator(submit_start=500, max_start_spread=0)
    assert gen.get_all_jobs()[0].submit_time == 500
    gen.regen_jobs()
    assert gen.submit_start == 500
    assert gen.get_all_jobs()[0].submit_time == 500


def test_get_jobs_cursor():
    gen = make_generator(job_num=10, parallel=5)
    all_jobs = gen.get_all_jobs()
    assert gen.get_jobs(4) == all_jobs[:4]
    assert gen.get_jobs(4) == all_jobs[4:8]
    assert gen.get_jobs(4) == all_jobs[8:]
    assert gen.get_jobs(4) == []
    with pytest.raises(ValueError):
        gen.get_jobs(-1)


@pytest.mark.parametrize("overrides", [
    dict(parallel=0),
    dict(exec_min=10, exec_max=5),
    dict(min_gap=10, max_gap=5),
    dict(min_node_procs=4, max_node_procs=2),
])
def test_generation_failure_wrapped(overrides):
    gen = make_generator(**overrides)
    assert gen.is_prepared()
    with pytest.raises(TraceGenerationError):
        gen.get_all_jobs()


def test_job_creator_failure_wrapped():
    def failing(id, submit_time, queue_time, exec_time, nprocs, per_proc_cpu, per_proc_mem,
                user, group, executable, preceding, delay_after):
        raise RuntimeError("out of job records")

    gen = make_generator()
    gen.job_creator = failing
    with pytest.raises(TraceGenerationError) as excinfo:
        gen.get_all_jobs()
    assert isinstance(excinfo.value.__cause__, RuntimeError)


def test_bad_job_creator():
    with pytest.raises(JobFactoryError):
        RepetitiveRandomTraceGenerator(job_creator=lambda: None)
