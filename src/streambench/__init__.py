"""
Streambench measures the latency and throughput of streaming text-generation
services across single generations and repeated warm-up and measured rounds.
"""

import contextlib
import logging
import os

with (
    open(os.devnull, "w") as devnull,  # noqa: PTH123
    contextlib.redirect_stderr(devnull),
    contextlib.redirect_stdout(devnull),
):
    from transformers.utils import logging as hf_logging  # type: ignore[import]

    # Set the log level for the transformers library to ERROR
    # to ignore None of PyTorch, TensorFlow found
    os.environ["TOKENIZERS_PARALLELISM"] = "false"  # Silence warnings for tokenizers
    hf_logging.set_verbosity_error()
    logging.getLogger("transformers").setLevel(logging.ERROR)

from .logger import configure_logger, logger
from .settings import (
    BenchmarkSettings,
    LoggingSettings,
    Settings,
    print_config,
    reload_settings,
    settings,
)

__all__ = [
    "BenchmarkSettings",
    "LoggingSettings",
    "Settings",
    "configure_logger",
    "logger",
    "print_config",
    "reload_settings",
    "settings",
]
