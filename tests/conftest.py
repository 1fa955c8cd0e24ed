import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--runlong", action="store_true", default=False, help="Run long-running tests"
    )


def pytest_runtest_setup(item):
    if "long" in item.keywords and not item.config.getoption("--runlong"):
        reason = "Skipping test because it requires --runlong"
        pytest.skip(reason)


@pytest.fixture()
def write_trace(tmp_path):
    """
    Writes trace lines to a file in the test's temporary directory and returns its path.
    """
    def _write(lines, name="trace.txt"):
        path = tmp_path / name
        path.write_text("".join(f"{line}\n" for line in lines))
        return path
    return _write
