"""Custom exceptions for the transcode controller.

Planning errors are raised to the caller before any encoder process is
spawned. Everything that goes wrong after spawn is reported as Outcome data
instead, so only the exceptions below ever cross the public surface.
"""


class TranscodeControllerError(Exception):
    """Base exception for transcode controller errors.

    All controller exceptions inherit from this class, allowing callers
    to catch every controller error with a single except clause.
    """


class PlanningError(TranscodeControllerError):
    """Raised when a request cannot be turned into an encode plan."""


class UnsupportedFormatError(PlanningError):
    """Raised when the target format is not one of the recognized formats.

    Attributes:
        target_format: The rejected format value.
    """

    def __init__(self, target_format: object) -> None:
        self.target_format = target_format
        super().__init__(f"Unsupported format: {target_format}")


class UnsupportedConversionError(PlanningError):
    """Raised when the input media kind cannot produce the target kind.

    Attributes:
        input_kind: Media kind of the input ("audio" or "video").
        target_format: The requested target format.
    """

    def __init__(self, input_kind: str, target_format: str) -> None:
        self.input_kind = input_kind
        self.target_format = target_format
        super().__init__(
            f"Unsupported conversion from {input_kind} input to {target_format}"
        )


class InvalidClipWindowError(PlanningError, ValueError):
    """Raised when a clip window has a negative bound or end <= start."""


class ProbeError(TranscodeControllerError):
    """Raised when the duration probe fails.

    The duration resolver catches this and degrades to progress-less
    operation; it never fails a job.
    """


class EngineUnavailableError(TranscodeControllerError):
    """Raised when the encoding engine cannot be started."""


class ConfigError(TranscodeControllerError):
    """Raised when the configuration file is invalid."""
