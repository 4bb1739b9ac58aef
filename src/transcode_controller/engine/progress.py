"""FFmpeg progress parsing utilities.

FFmpeg reports encoding statistics on stderr in lines like:

    frame= 1234 fps= 30 q=28.0 size= 2048kB time=00:01:23.45 bitrate=... speed=2.0x

Audio-only encodes omit the frame counter, so the ``time=`` field is the
only thing parsed into an elapsed-time sample.
"""

import re
from dataclasses import dataclass

_TIME_PATTERN = re.compile(r"time=\s*(-?)(\d+):(\d{2}):(\d{2})(?:\.(\d+))?")


@dataclass
class FFmpegProgress:
    """Parsed FFmpeg progress line."""

    out_time_ms: int


def parse_timestamp_ms(hours: str, minutes: str, seconds: str, fraction: str) -> int:
    """Convert HH:MM:SS.fraction components to milliseconds."""
    total = (int(hours) * 3600 + int(minutes) * 60 + int(seconds)) * 1000
    if fraction:
        # Pad/truncate to milliseconds (FFmpeg prints centiseconds)
        total += int(fraction[:3].ljust(3, "0"))
    return total


def parse_stderr_progress(line: str) -> FFmpegProgress | None:
    """Parse an FFmpeg stderr progress line.

    Args:
        line: A line from FFmpeg stderr.

    Returns:
        Parsed FFmpegProgress, or None if the line carries no usable time.
        FFmpeg prints ``time=N/A`` and negative times before the first
        packet; both are treated as no sample.
    """
    match = _TIME_PATTERN.search(line)
    if match is None:
        return None
    negative, hours, minutes, seconds, fraction = match.groups()
    if negative:
        return None

    return FFmpegProgress(
        out_time_ms=parse_timestamp_ms(hours, minutes, seconds, fraction or ""),
    )
