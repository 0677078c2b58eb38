"""Routes one CLI invocation to its handler."""

import sys
from eliot import start_action
from msc.arguments import ArgKind, parse_identifier
from msc.errors import InvalidArgument, QueryFieldAbsent
from msc.logging import command_logger, log_command
from msc.nowplaying import format_now_playing
from msc.query import coalesce, entries, lookup, present, render, value
from msc.registry import REGISTRY, CommandDescriptor, CommandKind, CommandRegistry
from msc.resolver import ValueResolver
from msc.seek import Seeker
from msc.selection import Prompter, SelectionFlow
from typing import TextIO

PLACEHOLDER = "?"


class Dispatcher:
    """Dispatches ``option [argument]`` against a device transport."""

    def __init__(
        self,
        transport,
        registry: CommandRegistry = REGISTRY,
        prompter: Prompter | None = None,
        out: TextIO | None = None,
        usage: str = "",
    ):
        """Initialize the dispatcher.

        Args:
            transport: Device transport (``request``/``fetch_json``)
            registry: Command table
            prompter: Interactive chooser for selectors; None lists instead
            out: Output stream (default: stdout)
            usage: Text printed by the help command
        """
        self.transport = transport
        self.registry = registry
        self.out = out or sys.stdout
        self.usage = usage
        self.resolver = ValueResolver(transport)
        self.selection = SelectionFlow(transport, prompter)

        self.handlers = {
            CommandKind.ACTION: self._handle_action,
            CommandKind.QUERY: self._handle_query,
            CommandKind.STATEFUL_FIELD: self._handle_field,
            CommandKind.SELECTOR: self._handle_selector,
            CommandKind.SEEK: self._handle_seek,
            CommandKind.INFO: self._handle_info,
            CommandKind.QUEUE: self._handle_queue,
            CommandKind.HELP: self._handle_help,
        }

    def dispatch(self, option: str | None, argument: str | None = None):
        """Run one command.

        Raises:
            InvalidOption: Unknown option
            MscError: Any argument, transport or query failure
        """
        descriptor = self.registry.lookup(option)
        log_command(option, descriptor.name, descriptor.kind.value)
        with start_action(command_logger, "dispatch", name=descriptor.name, argument=argument or ""):
            return self.handlers[descriptor.kind](descriptor, argument or "")

    def _print(self, line) -> None:
        self.out.write(f"{line}\n")

    def _handle_action(self, descriptor: CommandDescriptor, argument: str):
        self.transport.request(descriptor.path, descriptor.method)

    def _handle_query(self, descriptor: CommandDescriptor, argument: str):
        parsed = parse_identifier(argument)
        if parsed.kind is ArgKind.INVALID:
            raise InvalidArgument()

        document = self.transport.fetch_json(descriptor.endpoint)

        if parsed.kind is ArgKind.EMPTY:
            dump = descriptor.dump
            for key, raw in entries(document, skip=dump.skip, exclude=dump.exclude):
                self._print(f"{key}={render(raw)}")
            return

        raw = value(document, parsed.raw)
        if present(raw):
            self._print(render(raw))

    def _handle_field(self, descriptor: CommandDescriptor, argument: str):
        resolution = self.resolver.apply(descriptor.field, descriptor.grammar, argument)
        if resolution.query and present(resolution.reading):
            self._print(render(resolution.reading))
        return resolution

    def _handle_selector(self, descriptor: CommandDescriptor, argument: str):
        return self.selection.run(descriptor.selector, argument, self.out)

    def _handle_seek(self, descriptor: CommandDescriptor, argument: str):
        return Seeker(self.transport, descriptor.endpoint, descriptor.method).seek(argument)

    def _handle_info(self, descriptor: CommandDescriptor, argument: str):
        self._print(format_now_playing(self.transport.fetch_json(descriptor.endpoint)))

    def _handle_queue(self, descriptor: CommandDescriptor, argument: str):
        document = self.transport.fetch_json(descriptor.endpoint)
        try:
            tracks = lookup(document, "children")
        except QueryFieldAbsent:
            return
        for track in tracks or []:
            if not isinstance(track, dict):
                continue
            artist = coalesce(track, "artistName", default=PLACEHOLDER)
            album = coalesce(track, "albumName", default=PLACEHOLDER)
            self._print(f"{artist} / {render(track.get('name'))} [{album}]")

    def _handle_help(self, descriptor: CommandDescriptor, argument: str):
        self.out.write(self.usage)
