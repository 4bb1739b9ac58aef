"""Progress denominator resolution."""

from __future__ import annotations

import logging
import math
import subprocess  # nosec B404 - needed for TimeoutExpired

from transcode_controller.domain import ConversionRequest
from transcode_controller.engine.interface import DurationProber
from transcode_controller.exceptions import ProbeError

logger = logging.getLogger(__name__)


def resolve_duration(
    request: ConversionRequest, prober: DurationProber
) -> int | None:
    """Resolve the duration used to normalize progress, in milliseconds.

    Clip requests use the clip length directly. Full-file conversions probe
    the input; any probe failure degrades to None (progress reporting is
    disabled, the transcode itself still runs).

    Args:
        request: The conversion request.
        prober: Duration prober for full-file conversions.

    Returns:
        Duration in milliseconds, or None if it cannot be determined.
    """
    if request.clip is not None:
        return request.clip.duration_ms

    try:
        seconds = prober.probe_duration(request.input_path)
    except (ProbeError, OSError, subprocess.TimeoutExpired) as e:
        logger.warning(
            "Could not determine media duration for %s: %s",
            request.input_path,
            e,
            extra={"input_path": str(request.input_path)},
        )
        return None
    except Exception as e:
        # Any prober failure only disables progress
        logger.warning(
            "Duration probe for %s failed unexpectedly: %s",
            request.input_path,
            e,
            exc_info=True,
            extra={"input_path": str(request.input_path)},
        )
        return None

    if seconds is None:
        logger.info(
            "No duration reported for %s, progress disabled", request.input_path
        )
        return None

    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        logger.warning("Unparsable duration for %s: %r", request.input_path, seconds)
        return None
    if not math.isfinite(seconds) or seconds <= 0:
        return None

    return round(seconds * 1000)
