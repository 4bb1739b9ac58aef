"""Shared helpers for the transcode controller."""

from transcode_controller.core.subprocess_utils import CommandResult, run_command

__all__ = ["CommandResult", "run_command"]
