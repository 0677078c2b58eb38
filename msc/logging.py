"""
Logging configuration for msc using eliot.

Every dispatch and every device request runs inside an eliot action, so a
JSON log file shows which option produced which HTTP calls and how values
were resolved.
"""

import eliot
import logging
import sys
from eliot import log_message, write_traceback
from eliot.stdlib import EliotHandler
from pathlib import Path


class HumanReadableDestination:
    """Destination that formats logs in a human-readable format."""

    def __init__(self, file):
        self.file = file

    def __call__(self, message):
        """Format and write log message."""
        # Skip internal Eliot messages (action start/status messages)
        if not message.get("message_type"):
            return

        msg_type = message["message_type"]

        if msg_type == "device_request":
            output = f"[HTTP] {message.get('method', 'GET')} {message.get('path', '')}"
            if "attempt" in message and message["attempt"] > 0:
                output += f" (retry {message['attempt']})"
        elif msg_type == "value_resolved":
            output = f"[{message.get('policy', 'value').upper()}] {message.get('endpoint')}.{message.get('key')}"
            if "current" in message:
                output += f": {message['current']} → {message.get('value')}"
            else:
                output += f" = {message.get('value')}"
        elif msg_type == "command_dispatched":
            output = f"[CLI] {message.get('option')} → {message.get('name')} ({message.get('kind')})"
        elif msg_type == "error_occurred":
            output = f"[ERROR] {message.get('error_type')}: {message.get('error_message')}"
        elif "description" in message:
            output = message["description"]
        elif "message" in message:
            output = message["message"]
        else:
            return

        if output and output.strip():
            self.file.write(output + "\n")
            self.file.flush()


def setup_logging(log_level: str = "WARNING", log_file: str | None = None, verbose: bool = False) -> None:
    """
    Set up eliot logging for the application.

    Args:
        log_level: Level for stdlib loggers bridged into eliot
        log_file: Optional file path to write raw JSON logs to
        verbose: Echo human-readable log lines on stderr
    """
    if verbose:
        eliot.add_destination(HumanReadableDestination(sys.stderr))

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        eliot.to_file(open(log_path, "a"))

    # Set up Python logging (urllib3, requests) to work with eliot
    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    if not any(isinstance(h, EliotHandler) for h in logger.handlers):
        logger.addHandler(EliotHandler())

    log_message(message_type="logging_setup", log_level=log_level, log_file=log_file or "none", verbose=verbose)


def get_logger(name: str):
    """
    Get an eliot logger instance for a specific component.

    Returns:
        Eliot Logger instance for use with start_action()
    """
    from eliot import Logger

    return Logger()


cli_logger = get_logger("msc_cli")
transport_logger = get_logger("msc_transport")
command_logger = get_logger("msc_command")


def log_device_request(method: str, path: str, **context):
    """
    Log an HTTP request issued against the device.

    Args:
        method: HTTP method
        path: Resource path relative to the device base URL
        **context: Additional context data
    """
    log_message(message_type="device_request", method=method, path=path, **context)


def log_value_resolved(policy: str, endpoint: str, key: str, value, **context):
    """
    Log the value computed for a stateful field write.

    Args:
        policy: Resolution policy (cycle, absolute, relative, seek)
        endpoint: Device resource path
        key: Field name
        value: Value about to be written
        **context: Additional context data (current value, delta, ...)
    """
    log_message(message_type="value_resolved", policy=policy, endpoint=endpoint, key=key, value=value, **context)


def log_command(option: str, name: str, kind: str, **context):
    log_message(message_type="command_dispatched", option=option, name=name, kind=kind, **context)


def log_error(logger: eliot.Logger, error: Exception, **context):
    """
    Log errors with full context and traceback.

    Args:
        logger: Eliot logger instance
        error: Exception that occurred
        **context: Additional context data
    """
    write_traceback(logger, exc_info=sys.exc_info())
    log_message(message_type="error_occurred", error_message=str(error), error_type=type(error).__name__, **context)
