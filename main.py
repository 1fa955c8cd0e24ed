"""
wltrace: workload trace producers for cluster and cloud simulators
"""
import argparse
from wltrace.reader import run_read_add_parser
from wltrace.generator import run_generate_add_parser


def main(cli_args: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="""
            Reads workload traces from files or generates random ones.
        """,
        allow_abbrev=False,
    )
    subparsers = parser.add_subparsers(required=True)

    run_read_add_parser(subparsers)
    run_generate_add_parser(subparsers)

    args = parser.parse_args(cli_args)
    assert args.impl, "subparsers should add an impl function to args"
    args.impl(args)


if __name__ == "__main__":
    main()
