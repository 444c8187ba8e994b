"""Core types shared by every layer."""

from .config import Config, load_config
from .errors import ErrorCode, ShelfError, exit_code_for
from .result import Err, Ok, Result

__all__ = [
    # config
    "Config",
    "load_config",
    # errors
    "ErrorCode",
    "ShelfError",
    "exit_code_for",
    # result
    "Err",
    "Ok",
    "Result",
]
