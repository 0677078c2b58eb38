"""Selection flow: list a child collection, pick one entry, play it."""

import sys
from eliot import log_message, start_action
from msc.arguments import ArgKind, parse_index
from msc.errors import InvalidArgument, QueryTypeMismatch
from msc.logging import command_logger
from msc.models import SelectableItem
from msc.query import children
from msc.registry import SelectorSpec
from pydantic import ValidationError
from typing import Protocol, TextIO


class Prompter(Protocol):
    """Blocks until the user picks one of ``names``; returns a 1-based index."""

    def choose(self, names: list[str]) -> int: ...


class InteractivePrompter:
    """Numbered menu on stderr with a line read from stdin.

    Re-prompts on empty, non-numeric or out-of-range input. End of input
    aborts with InvalidArgument.
    """

    prompt = "Enter option: "

    def __init__(self, stdin: TextIO | None = None, stderr: TextIO | None = None):
        self.stdin = stdin or sys.stdin
        self.stderr = stderr or sys.stderr

    def choose(self, names: list[str]) -> int:
        if not names:
            raise InvalidArgument()

        self.stderr.write(render_menu(names))
        while True:
            self.stderr.write(self.prompt)
            self.stderr.flush()
            line = self.stdin.readline()
            if not line:
                raise InvalidArgument()
            parsed = parse_index(line.strip())
            if parsed.kind is ArgKind.INDEX and 1 <= parsed.value <= len(names):
                return parsed.value
            self.stderr.write("Invalid option.\n")


def render_menu(names: list[str]) -> str:
    return "".join(f"{index}) {name}\n" for index, name in enumerate(names, start=1))


def list_items(transport, selector: SelectorSpec) -> list[SelectableItem]:
    """Fetch the parent resource and project its surviving children in order.

    Raises:
        QueryTypeMismatch: A child lacks a name or target
    """
    document = transport.fetch_json(selector.endpoint)
    try:
        return [
            SelectableItem.model_validate(child)
            for child in children(document, predicate=selector.predicate, sort_key=selector.sort_key)
        ]
    except ValidationError as e:
        raise QueryTypeMismatch(selector.endpoint) from e


def pick(items: list[SelectableItem], token: str | None) -> SelectableItem:
    """Item at a 1-based index argument.

    Raises:
        InvalidArgument: Malformed index, zero, or beyond the listing
    """
    parsed = parse_index(token)
    if parsed.kind is not ArgKind.INDEX or not 1 <= parsed.value <= len(items):
        raise InvalidArgument()
    return items[parsed.value - 1]


class SelectionFlow:
    """Lists a selector's items and plays the chosen one."""

    def __init__(self, transport, prompter: Prompter | None = None, play_method: str = "HEAD"):
        """Initialize the flow.

        Args:
            transport: Device transport
            prompter: Interactive chooser; None prints the listing instead
            play_method: HTTP method of the play call
        """
        self.transport = transport
        self.prompter = prompter
        self.play_method = play_method

    def run(self, selector: SelectorSpec, token: str | None, out: TextIO) -> SelectableItem | None:
        """List, resolve and play.

        Returns:
            The item played, or None when only a listing was printed
        """
        with start_action(command_logger, "select", endpoint=selector.endpoint, token=token or ""):
            items = list_items(self.transport, selector)

            if token:
                item = pick(items, token)
            elif self.prompter is not None:
                index = self.prompter.choose([i.display_name for i in items])
                item = items[index - 1]
            else:
                out.write(render_menu([i.display_name for i in items]))
                return None

            self.play(item)
            return item

    def play(self, item: SelectableItem):
        log_message(message_type="item_selected", name=item.display_name, target=item.target_id)
        self.transport.request(f"{item.target_id}?cmd=play", self.play_method)
