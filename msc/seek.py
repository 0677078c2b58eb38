"""Seek arithmetic for the now-playing track."""

from eliot import start_action
from msc.arguments import ArgKind, ParsedArgument, parse_signed
from msc.config import SEEK_MAX_SECONDS, SEEK_REWIND_RELATIVE
from msc.errors import InvalidArgument, MissingArgument, QueryTypeMismatch
from msc.logging import command_logger, log_value_resolved
from msc.query import lookup
from msc.resolver import clamp


def ms_to_seconds(milliseconds, key: str = "position") -> int:
    """Whole seconds, rounding halves up. Absent or null counts as 0.

    Raises:
        QueryTypeMismatch: Not a number
    """
    if milliseconds is None or milliseconds == "":
        return 0
    try:
        return int(float(milliseconds) / 1000 + 0.5)
    except (TypeError, ValueError, OverflowError) as e:
        raise QueryTypeMismatch(key, milliseconds) from e


def seek_target(parsed: ParsedArgument, position: int, duration: int, rewind_relative: bool = SEEK_REWIND_RELATIVE) -> int | None:
    """Absolute target position in seconds, or None when nothing is playing.

    Args:
        parsed: Absolute ``N`` or signed ``+N``/``-N`` argument
        position: Current position in seconds
        duration: Track duration in seconds
        rewind_relative: Treat ``-N`` as ``position - N`` instead of ``N - position``

    Returns:
        Target clamped to ``[0, duration - 1]``
    """
    if duration == 0:
        return None

    target = parsed.value
    if parsed.sign == "+":
        target = position + parsed.value
    elif parsed.sign == "-":
        target = position - parsed.value if rewind_relative else parsed.value - position

    return clamp(target, 0, duration - 1)


def parse_seek(token: str | None) -> ParsedArgument:
    """Seek argument: ``N``, ``+N`` or ``-N`` seconds, at most 3600.

    Raises:
        MissingArgument: No argument, or one of the wrong shape
    """
    parsed = parse_signed(token, SEEK_MAX_SECONDS, query=False)
    if parsed.kind is ArgKind.EMPTY:
        raise MissingArgument()
    if parsed.kind is ArgKind.INVALID:
        raise InvalidArgument(MissingArgument.message)
    return parsed


class Seeker:
    """Reads the playback position and issues the seek command."""

    def __init__(self, transport, endpoint: str = "nowplaying", method: str = "HEAD", rewind_relative: bool = SEEK_REWIND_RELATIVE):
        self.transport = transport
        self.endpoint = endpoint
        self.method = method
        self.rewind_relative = rewind_relative

    def seek(self, token: str | None) -> int | None:
        """Seek the current track.

        Returns:
            Target position in seconds, or None when no track is live
        """
        parsed = parse_seek(token)
        with start_action(command_logger, "seek", token=token):
            document = self.transport.fetch_json(self.endpoint)
            position = ms_to_seconds(lookup(document, "transportPosition", default=0), "transportPosition")
            duration = ms_to_seconds(lookup(document, "duration", default=0), "duration")

            target = seek_target(parsed, position, duration, self.rewind_relative)
            if target is None:
                return None

            log_value_resolved("seek", self.endpoint, "position", target, current=position, duration=duration)
            self.transport.request(f"{self.endpoint}?cmd=seek&position={target * 1000}", self.method)
            return target
