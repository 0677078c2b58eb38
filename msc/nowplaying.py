"""Now-playing summary.

Pure formatting of the ``nowplaying`` document into two lines:

    Artist / Title [Album]
    1:02 / 4:10 - FLAC 44.1kHz 16bit 1411kb/s [Spotify]
"""

import math
from msc.models import NowPlaying
from pydantic import ValidationError

PLACEHOLDER = "?"
BITRATE_THRESHOLD = 16000
SOURCE_PREFIX = "inputs/"


def format_duration(milliseconds):
    """
    Format a duration in milliseconds to M:SS format
    """
    if not milliseconds:
        return "0:00"

    try:
        milliseconds = int(milliseconds)
        minutes = milliseconds // 60000
        remaining_seconds = (milliseconds // 1000) % 60
        return f"{minutes}:{remaining_seconds:02d}"
    except (ValueError, TypeError):
        return "0:00"


def _round_half_up(number: float) -> int:
    return int(math.floor(number + 0.5)) if number >= 0 else -int(math.floor(-number + 0.5))


def _plain(number: float) -> str:
    """Print a number without a trailing ``.0``."""
    if float(number).is_integer():
        return str(int(number))
    return f"{number:g}"


def format_bitrate(bit_rate: float) -> str:
    """Small values are device codes and shown as-is; larger ones are bps shown as kbps."""
    if bit_rate < BITRATE_THRESHOLD:
        return _plain(bit_rate)
    return str(_round_half_up(bit_rate / 1000))


def source_label(now: NowPlaying) -> str:
    if now.source_detail is not None:
        return now.source_detail
    if now.source is None:
        return PLACEHOLDER
    return now.source.removeprefix(SOURCE_PREFIX)


def _text(raw: str | None) -> str:
    return PLACEHOLDER if raw is None else raw


def format_now_playing(document: dict) -> str:
    """Render the two-line now-playing summary.

    Args:
        document: Decoded ``nowplaying`` resource

    Returns:
        Summary text; missing fields show ``?`` (or 0 for numbers)
    """
    try:
        now = NowPlaying.model_validate(document or {})
    except ValidationError:
        now = NowPlaying()

    first = f"{_text(now.artist)} / {_text(now.title)} [{_text(now.album)}]"
    second = (
        f"{format_duration(now.position_ms)} / {format_duration(now.duration_ms)} - {_text(now.codec)} "
        f"{_plain(now.sample_rate / 1000)}kHz {now.bit_depth}bit {format_bitrate(now.bit_rate)}kb/s "
        f"[{source_label(now)}]"
    )
    return f"{first}\n{second}"
