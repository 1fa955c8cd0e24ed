from pathlib import Path


def find_project_root():
    path = Path(__file__).resolve()
    while not (path / "main.py").exists():
        if path.parent == path:
            raise RuntimeError("Could not find project root.")
        path = path.parent
    return path


PROJECT_ROOT = find_project_root()


def prezi_lines(count, start=0, step=10):
    """ Valid prezi trace lines, job i arrives at start + i * step and runs i + 0.5 seconds """
    tags = ("url", "default", "export")
    return [f"{start + i * step} {i + 0.5:.3f} job{i} {tags[i % 3]}" for i in range(count)]
