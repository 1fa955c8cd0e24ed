"""
Module for utility functions.

This module contains helpers shared by the trace producers and the CLI: number parsing for trace
fields, integer-uniform draws, tabular rendering of job lists and the glue between pydantic models
and argparse.
"""

import argparse
import math
import re
import sys
from pathlib import Path
from typing import Annotated as A, TypeVar, Callable, TypeAlias

import numpy as np
import pandas as pd
import yaml
from pydantic import BaseModel, AfterValidator
from pydantic_settings import BaseSettings, SettingsConfigDict, CliApp, CliSettingsSource


INT_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)
FLOAT_PATTERN = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?", re.ASCII)
""" Plain ASCII decimal notation, no digit separators or other scripts' digits """


def is_int(text: str) -> bool:
    return INT_PATTERN.fullmatch(text) is not None


def is_finite_float(text: str) -> bool:
    if FLOAT_PATTERN.fullmatch(text) is None:
        return False
    return math.isfinite(float(text))


def parse_long_number(text: str) -> int:
    """
    Parse an integer field that might have been written in decimal or exponent notation.

    '128', '128.0' and '1.28e2' all give 128. Fractions are truncated toward zero.

    Raises
    ------
    ValueError
        If the text is not a finite number in plain decimal notation.
    """
    text = text.strip()
    if is_int(text):
        return int(text)
    if not is_finite_float(text):
        raise ValueError(f"not a finite number: {text!r}")
    return int(float(text))


def draw_uniform(rng: np.random.Generator, width: int) -> int:
    """
    Draw an integer uniformly from [0, width).

    A width of 0 always gives 0 without consuming randomness from rng. Negative widths are
    rejected by numpy with a ValueError.
    """
    if width == 0:
        return 0
    return int(rng.integers(width))


def jobs_to_dataframe(jobs: list) -> pd.DataFrame:
    """ Tabulate jobs, one row per job, one column per job parameter """
    rows = []
    for job in jobs:
        if hasattr(job, "to_dict"):
            rows.append(job.to_dict())
        else:
            rows.append(dict(vars(job)))
    return pd.DataFrame(rows)


def read_yaml(config_file: str | None):
    if config_file == "-":
        return yaml.safe_load(sys.stdin.read()) or {}
    elif config_file:
        return yaml.safe_load(Path(config_file).read_text()) or {}
    else:
        return {}


ExpandedPath = A[Path, AfterValidator(lambda v: Path(v).expanduser().resolve())]
""" Type that that expands ~ and environment variables in a path string """

T = TypeVar("T", bound=BaseModel)


def pydantic_add_args(
    parser: argparse.ArgumentParser, model_cls: type[T],
    model_config: SettingsConfigDict | None = None,
) -> Callable[[argparse.Namespace, dict | None], T]:
    """
    Add arguments to the parser from the model. Returns a function that can be used to parse the
    model from the argparse args.

    The command models are plain BaseModels so they can be built programmatically as well, here
    they are wrapped in a throwaway settings class to borrow the pydantic-settings cli parser.
    """
    model_config_dict = SettingsConfigDict({
        "cli_implicit_flags": True,
        "cli_kebab_case": True,
        **(model_config or {}),
        "cli_parse_args": False,  # Don't automatically parse args
    })

    class SettingsModel(model_cls, BaseSettings):
        @classmethod
        def settings_customise_sources(cls, settings_cls,
                                       init_settings, env_settings, dotenv_settings, file_secret_settings,
                                       ):
            return (init_settings,)  # Don't load from env vars or anything else

        model_config = model_config_dict

    cli_settings_source = CliSettingsSource(SettingsModel, root_parser=parser)

    def model_validate_args(args: argparse.Namespace, data: dict | None = None):
        model = CliApp.run(SettingsModel,
                           cli_args=args,
                           cli_settings_source=cli_settings_source,
                           **(data or {}),
                           )
        # Recreate model so we don't return the SettingsModel subclass
        return model_cls.model_validate(model.model_dump())
    return model_validate_args


SubParsers: TypeAlias = "argparse._SubParsersAction[argparse.ArgumentParser]"
""" Alias for the result of argparse parser.add_subparsers """
