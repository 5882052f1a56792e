"""Helpers for running external command-line programs."""

from .args import kebab_case, obj_to_args
from .runner import ExecError, ExecResult, Executor, build_argv, exec_command, exec_sync

__all__ = [
    "ExecError",
    "ExecResult",
    "Executor",
    "build_argv",
    "exec_command",
    "exec_sync",
    "kebab_case",
    "obj_to_args",
]
