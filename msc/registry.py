"""Declarative command table.

Each CLI option maps to exactly one ``CommandDescriptor``. Adding a device
field or alias is a table edit; the dispatcher never branches on names.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from msc.errors import InvalidOption
from typing import Any


class CommandKind(Enum):
    ACTION = "action"
    QUERY = "query"
    STATEFUL_FIELD = "stateful_field"
    SELECTOR = "selector"
    SEEK = "seek"
    INFO = "info"
    QUEUE = "queue"
    HELP = "help"


class ArgGrammar(Enum):
    TOGGLE = "toggle"  # empty cycles, single digit below mod sets
    BOUNDED_DIGIT = "bounded_digit"  # absolute 0..max only
    RELATIVE_OR_ABSOLUTE = "relative_or_absolute"  # N, +N, -N within 0..max
    QUERY_ONLY = "query_only"


@dataclass(frozen=True)
class DeviceField:
    """A read/write scalar of a device resource."""

    endpoint: str
    key: str
    mod: int | None = None
    max: int | None = None

    @property
    def cycling(self) -> bool:
        return self.mod is not None

    @property
    def upper(self) -> int:
        """Largest value the field accepts."""
        return self.max if self.max is not None else self.mod - 1

    def write_path(self, value: int) -> str:
        return f"{self.endpoint}?{self.key}={value}"


@dataclass(frozen=True)
class ResourceDump:
    """Which top-level entries of a resource are shown by a bare query."""

    skip: int = 5
    exclude: frozenset[str] = frozenset({"children", "cpu"})


@dataclass(frozen=True)
class SelectorSpec:
    """A filtered, optionally sorted, child collection to pick from."""

    endpoint: str
    predicate: Callable[[dict], bool]
    sort_key: Callable[[dict], Any] | None = None


@dataclass(frozen=True)
class CommandDescriptor:
    name: str
    kind: CommandKind
    endpoint: str | None = None
    aliases: frozenset[str] = frozenset()
    method: str = "GET"
    query: str = ""
    grammar: ArgGrammar | None = None
    field: DeviceField | None = None
    selector: SelectorSpec | None = None
    dump: ResourceDump | None = None

    @property
    def path(self) -> str:
        """Endpoint plus the fixed query string of an action."""
        return f"{self.endpoint}?{self.query}" if self.query else self.endpoint


def _input_enabled(child: dict) -> bool:
    return str(child.get("disabled")) == "0"


def _is_radio_preset(child: dict) -> bool:
    return child.get("stationKey") is not None


def _preset_order(child: dict):
    try:
        return (0, float(child.get("presetID")))
    except (TypeError, ValueError):
        return (1, 0.0)


def action(name: str, endpoint: str, query: str, method: str = "GET", aliases: Iterable[str] = ()) -> CommandDescriptor:
    return CommandDescriptor(name, CommandKind.ACTION, endpoint, frozenset(aliases), method=method, query=query)


def toggle(name: str, endpoint: str, key: str | None = None, mod: int = 2, aliases: Iterable[str] = ()) -> CommandDescriptor:
    return CommandDescriptor(
        name,
        CommandKind.STATEFUL_FIELD,
        endpoint,
        frozenset(aliases),
        grammar=ArgGrammar.TOGGLE,
        field=DeviceField(endpoint, key or name, mod=mod),
    )


def number(name: str, endpoint: str, key: str | None = None, maximum: int = 100, aliases: Iterable[str] = ()) -> CommandDescriptor:
    return CommandDescriptor(
        name,
        CommandKind.STATEFUL_FIELD,
        endpoint,
        frozenset(aliases),
        grammar=ArgGrammar.RELATIVE_OR_ABSOLUTE,
        field=DeviceField(endpoint, key or name, max=maximum),
    )


def resource(name: str, aliases: Iterable[str] = (), dump: ResourceDump = ResourceDump()) -> CommandDescriptor:
    return CommandDescriptor(name, CommandKind.QUERY, name, frozenset(aliases), dump=dump)


COMMANDS = (
    # Power
    action("standby", "power", "system=lona", method="PUT", aliases=("sleep",)),
    action("wake", "power", "system=on", method="PUT"),
    # Inputs
    CommandDescriptor(
        "inputs",
        CommandKind.SELECTOR,
        "inputs",
        frozenset({"input"}),
        selector=SelectorSpec("inputs", _input_enabled),
    ),
    CommandDescriptor(
        "radio",
        CommandKind.SELECTOR,
        "favourites",
        selector=SelectorSpec("favourites", _is_radio_preset, sort_key=_preset_order),
    ),
    # Playback
    action("next", "nowplaying", "cmd=next", method="HEAD"),
    action("play", "nowplaying", "cmd=play", method="HEAD"),
    action("playpause", "nowplaying", "cmd=playpause", method="HEAD", aliases=("pause",)),
    action("prev", "nowplaying", "cmd=prev", method="HEAD"),
    action("stop", "nowplaying", "cmd=stop", method="HEAD"),
    CommandDescriptor("seek", CommandKind.SEEK, "nowplaying", method="HEAD"),
    toggle("shuffle", "nowplaying"),
    toggle("repeat", "nowplaying", mod=3),
    # Playqueue
    action("clear", "inputs/playqueue", "clear=true", method="POST"),
    CommandDescriptor("playqueue", CommandKind.QUEUE, "inputs/playqueue", frozenset({"queue"})),
    # Audio
    toggle("loudness", "outputs"),
    toggle("mono", "outputs"),
    toggle("mute", "levels"),
    number("volume", "levels", aliases=("vol",)),
    # Other
    toggle("lightTheme", "userinterface", mod=3, aliases=("lighting",)),
    number("maxVolume", "outputs/poweramp", aliases=("max",)),
    toggle("position", "outputs", mod=3),
    number("standbyTimeout", "power", maximum=120, aliases=("timeout",)),
    # Information
    CommandDescriptor("info", CommandKind.INFO, "nowplaying"),
    resource("system/capabilities", aliases=("capabilities",)),
    resource("levels"),
    resource("network"),
    resource("nowplaying"),
    resource("outputs"),
    resource("outputs/poweramp", aliases=("poweramp",)),
    resource("power"),
    resource("system"),
    resource("update"),
    CommandDescriptor("help", CommandKind.HELP, aliases=frozenset({"-h", "--help"})),
)


class CommandRegistry:
    """Canonical names, aliases and descriptor lookup."""

    def __init__(self, descriptors: Iterable[CommandDescriptor]):
        self._by_name: dict[str, CommandDescriptor] = {}
        self.aliases: dict[str, str] = {}

        for descriptor in descriptors:
            if descriptor.name in self._by_name:
                raise ValueError(f"Duplicate command name: {descriptor.name}")
            self._by_name[descriptor.name] = descriptor

        for descriptor in self._by_name.values():
            for alias in descriptor.aliases:
                if alias in self._by_name or alias in self.aliases:
                    raise ValueError(f"Alias collision: {alias}")
                self.aliases[alias] = descriptor.name

    def resolve_alias(self, option: str) -> str:
        """Canonical name for ``option``; unknown tokens pass through unchanged."""
        return self.aliases.get(option, option)

    def lookup(self, option: str | None) -> CommandDescriptor:
        """Descriptor for an option or alias.

        Raises:
            InvalidOption: No descriptor and no alias matches
        """
        if not option:
            raise InvalidOption()
        try:
            return self._by_name[self.resolve_alias(option)]
        except KeyError:
            raise InvalidOption() from None

    def __contains__(self, option: str) -> bool:
        return self.resolve_alias(option) in self._by_name

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(self._by_name.values())

    def __len__(self) -> int:
        return len(self._by_name)


REGISTRY = CommandRegistry(COMMANDS)
