"""
CLI: control a Naim Mu-so over its local HTTP API.
  msc <option> [argument]
  msc volume +5
  msc radio 3
Host defaults to MUSO_HOST env or mu-so.
"""

import argparse
import sys
from eliot import start_action
from msc import config
from msc.dispatcher import Dispatcher
from msc.errors import MscError
from msc.logging import cli_logger, log_error, setup_logging
from msc.selection import InteractivePrompter
from msc.transport import DeviceTransport

PROG = "msc"

USAGE = f"""{PROG} v{config.__version__} - Control Naim Mu-so 2 over HTTP

Usage: {PROG} <option> [argument]

Power:
  standby | wake

Inputs:
  inputs [n] | radio [n]

Playback:
  next | pause | play | prev | stop
  seek <[+-]sec> | shuffle | repeat

Playqueue:
  clear | queue

Audio:
  loudness | mono | mute | volume <[+-]0..100>

Other:
  lighting | max <[+-]0..100> | position | timeout <[+-]0..120>

Information:
  info | capabilities | levels | network | nowplaying
  outputs | power | poweramp | system | update

Toggles cycle without an argument, take a digit to set, and '-' or '?' to query.
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, add_help=False, usage=f"{PROG} <option> [argument]")
    parser.add_argument("option", nargs="?", default="")
    parser.add_argument("argument", nargs="?", default="")
    parser.add_argument("-h", "--help", action="store_true", help="Show usage")
    parser.add_argument("--host", default=None, help="Device host (default: MUSO_HOST or mu-so)")
    parser.add_argument("--port", type=int, default=None, help="Device port (default: MUSO_PORT or 15081)")
    parser.add_argument("--timeout", type=float, default=config.REQUEST_TIMEOUT, help="Request timeout in seconds")
    parser.add_argument("--list", action="store_true", help="List selector items instead of prompting")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests on stderr")
    parser.add_argument("--version", action="version", version=f"{PROG} {config.__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(config.LOG_LEVEL, config.LOG_FILE, verbose=args.verbose)

    option = "help" if args.help else args.option
    interactive = not args.list and sys.stdin.isatty()
    timeout = config.clamp_to(args.timeout, config.TIMEOUT_BOUNDS)

    with start_action(cli_logger, "cli_invocation", option=option, argument=args.argument):
        try:
            with DeviceTransport(config.base_url(args.host, args.port), timeout=timeout) as transport:
                dispatcher = Dispatcher(
                    transport,
                    prompter=InteractivePrompter() if interactive else None,
                    usage=USAGE,
                )
                dispatcher.dispatch(option, args.argument)
        except MscError as e:
            log_error(cli_logger, e, option=option)
            print(e.message, file=sys.stderr)
            return e.exit_code
        except KeyboardInterrupt:
            return 130

    return 0


if __name__ == "__main__":
    sys.exit(main())
