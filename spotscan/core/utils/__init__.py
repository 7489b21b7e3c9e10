"""Utility modules for SpotScan."""

from spotscan.core.utils.process import (
    CommandResult,
    command_environment,
    run_checked,
    run_command,
    run_with_text_error_detection,
)

__all__ = [
    "CommandResult",
    "command_environment",
    "run_command",
    "run_checked",
    "run_with_text_error_detection",
]
