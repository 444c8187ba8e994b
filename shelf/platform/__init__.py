"""Platform abstraction layer: processes, filesystem, HTTP."""

from .files import copy_tree, link_exists, move_path, remove_path
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .process import ProcessError, ProcessExecutor, RecordingExecutor, SubprocessExecutor

__all__ = [
    # files
    "copy_tree",
    "link_exists",
    "move_path",
    "remove_path",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # process
    "ProcessError",
    "ProcessExecutor",
    "RecordingExecutor",
    "SubprocessExecutor",
]
