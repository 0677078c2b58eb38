"""Value resolution for stateful device fields.

Given a field and the raw argument token, decide whether the invocation is a
read-only query or compute the value to write: advance a cycling field,
write an absolute value, or apply a clamped relative delta to the current
value. At most one read and one write per invocation.
"""

from dataclasses import dataclass
from eliot import start_action
from msc.arguments import ArgKind, ParsedArgument, parse_signed, parse_toggle
from msc.errors import InvalidArgument, MissingArgument
from msc.logging import command_logger, log_value_resolved
from msc.query import integer, value
from msc.registry import ArgGrammar, DeviceField
from typing import Any


def next_in_cycle(current: int, mod: int) -> int:
    return (current + 1) % mod


def clamp(number: int, low: int, high: int) -> int:
    return max(low, min(high, number))


def apply_delta(current: int, delta: int, maximum: int) -> int:
    """Relative change, clamped to ``[0, maximum]`` (no wraparound)."""
    return clamp(current + delta, 0, maximum)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one argument.

    ``value`` is what gets written; a query leaves it None and carries the
    field's raw reading instead.
    """

    value: int | None = None
    reading: Any = None
    query: bool = False


def parse_for(field: DeviceField, grammar: ArgGrammar, token: str | None) -> ParsedArgument:
    """Parse ``token`` with the grammar a field declares."""
    if grammar is ArgGrammar.TOGGLE:
        return parse_toggle(token, field.mod)
    if grammar is ArgGrammar.QUERY_ONLY:
        return parse_toggle(token, 0)
    parsed = parse_signed(token, field.upper)
    if grammar is ArgGrammar.BOUNDED_DIGIT and parsed.kind is ArgKind.SIGNED:
        return ParsedArgument(ArgKind.INVALID, raw=parsed.raw)
    return parsed


class ValueResolver:
    """Resolves and writes stateful fields against a transport."""

    def __init__(self, transport):
        """Initialize the resolver.

        Args:
            transport: Object with ``fetch_json(path)`` and ``request(path, method)``
        """
        self.transport = transport

    def read(self, field: DeviceField) -> Any:
        """Raw current value of a field, None when absent."""
        return value(self.transport.fetch_json(field.endpoint), field.key)

    def current(self, field: DeviceField) -> int:
        return integer(self.transport.fetch_json(field.endpoint), field.key)

    def resolve(self, field: DeviceField, grammar: ArgGrammar, token: str | None) -> Resolution:
        """Work out what an argument means for ``field``.

        Raises:
            MissingArgument: A bounded field got no argument
            InvalidArgument: The argument does not fit the grammar
            QueryFieldAbsent: A cycle or delta needs a current value the device lacks
        """
        parsed = parse_for(field, grammar, token)

        if parsed.kind is ArgKind.QUERY or (grammar is ArgGrammar.QUERY_ONLY and parsed.kind is ArgKind.EMPTY):
            return Resolution(reading=self.read(field), query=True)

        if parsed.kind is ArgKind.EMPTY:
            if not field.cycling or grammar is ArgGrammar.BOUNDED_DIGIT:
                raise MissingArgument()
            current = self.current(field)
            new_value = next_in_cycle(current, field.mod)
            log_value_resolved("cycle", field.endpoint, field.key, new_value, current=current, mod=field.mod)
            return Resolution(value=new_value)

        if parsed.kind is ArgKind.DIGIT:
            log_value_resolved("absolute", field.endpoint, field.key, parsed.value)
            return Resolution(value=parsed.value)

        if parsed.kind is ArgKind.SIGNED:
            current = self.current(field)
            new_value = apply_delta(current, parsed.delta, field.upper)
            log_value_resolved("relative", field.endpoint, field.key, new_value, current=current, delta=parsed.delta)
            return Resolution(value=new_value)

        raise InvalidArgument()

    def apply(self, field: DeviceField, grammar: ArgGrammar, token: str | None) -> Resolution:
        """Resolve ``token`` and write the result with a PUT unless it is a query."""
        with start_action(command_logger, "resolve_field", endpoint=field.endpoint, key=field.key, token=token or ""):
            resolution = self.resolve(field, grammar, token)
            if not resolution.query:
                self.transport.request(field.write_path(resolution.value), "PUT")
            return resolution
