"""Error taxonomy for msc.

Every failure is terminal for the current invocation. Each error carries the
message printed on stderr and the process exit status.
"""


class MscError(Exception):
    """Base class for all msc failures."""

    message = "Unexpected error."
    exit_code = 1

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ConnectFailed(MscError):
    """The device could not be reached at the network layer."""

    message = "Network failure."
    exit_code = 7


class DeviceUnreachable(MscError):
    """The device answered with an error or reset the connection."""

    message = "Error, Mu-so in standby?"
    exit_code = 22


class RequestTimeout(MscError):
    message = "Operation timeout."
    exit_code = 28


class TransportError(MscError):
    """Any other transport failure, tagged with a short code."""

    def __init__(self, code: int | str):
        self.code = code
        super().__init__(f"(http) error {code}.")


class InvalidArgument(MscError):
    message = "Invalid argument."
    exit_code = 200


class MissingArgument(InvalidArgument):
    message = "Missing or invalid argument."
    exit_code = 201


class InvalidOption(MscError):
    message = "Missing or invalid option."
    exit_code = 202


class QueryError(MscError):
    exit_code = 5


class QueryFieldAbsent(QueryError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Missing field: {key}.")


class QueryTypeMismatch(QueryError):
    def __init__(self, key: str, value=None):
        self.key = key
        self.value = value
        super().__init__(f"Unexpected value for {key}.")
