"""msc: command-line control for a Naim Mu-so over its local HTTP API."""

from .dispatcher import Dispatcher
from .errors import MscError
from .registry import REGISTRY, CommandDescriptor, CommandKind
from .transport import DeviceTransport

__all__ = ["CommandDescriptor", "CommandKind", "DeviceTransport", "Dispatcher", "MscError", "REGISTRY"]
