"""Module containing the disguise error taxonomy."""

import collections.abc
import dataclasses
import enum
import typing

__all__: collections.abc.Sequence[str] = (
    "Stage",
    "DisguiseError",
    "StateError",
    "ValidationError",
    "ArgumentShapeError",
    "InvalidEnumError",
    "UnknownOptionError",
    "InvalidModeTransitionError",
    "CommandError",
    "ResponseError",
    "TypeMismatchError",
    "TransactionAbortedError",
)


class Stage(str, enum.Enum):
    """The stage of a call at which an error was raised."""

    NORMALIZE = "normalize"
    VALIDATE = "validate"
    SESSION = "session"
    RESPONSE = "response"
    TRANSACTION = "transaction"


class DisguiseError(Exception):
    stage: typing.ClassVar[Stage]
    dispatched: typing.ClassVar[bool]


class StateError(DisguiseError):
    stage = Stage.SESSION
    dispatched = False


class ValidationError(DisguiseError):
    """Base class for errors raised before anything reaches the transport."""

    dispatched = False


@dataclasses.dataclass
class ArgumentShapeError(ValidationError):
    stage = Stage.NORMALIZE

    message: str

    def __str__(self) -> str:
        return self.message


@dataclasses.dataclass
class InvalidEnumError(ValidationError):
    stage = Stage.VALIDATE

    value: object
    allowed: collections.abc.Set[str]
    parameter: str = "value"

    def __str__(self) -> str:
        allowed = ", ".join(sorted(self.allowed))
        return f"Invalid {self.parameter} {self.value!r}, expected one of: {allowed}"


@dataclasses.dataclass
class UnknownOptionError(ValidationError):
    stage = Stage.NORMALIZE

    family: str
    unknown: collections.abc.Set[str]
    allowed: collections.abc.Sequence[str]

    def __str__(self) -> str:
        unknown = ", ".join(sorted(self.unknown))
        allowed = ", ".join(self.allowed)
        return f"Unknown {self.family} option(s) {unknown}; recognised options are: {allowed}"


@dataclasses.dataclass
class InvalidModeTransitionError(ValidationError):
    stage = Stage.SESSION

    mode: str
    operation: str

    def __str__(self) -> str:
        return f"Cannot {self.operation} while the session is in {self.mode} mode"


class CommandError(DisguiseError):
    """Base class for errors reported after a command reached the transport."""

    dispatched = True


@dataclasses.dataclass
class ResponseError(CommandError):
    stage = Stage.RESPONSE

    code: str
    message: str

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_response(cls, response: str | bytes) -> "ResponseError":
        if isinstance(response, bytes):
            response = response.decode("utf-8", errors="replace")

        code, _, message = response.partition(" ")
        return cls(code, message or code)


@dataclasses.dataclass
class TypeMismatchError(ResponseError):
    """The stored value cannot take part in the requested operation."""


@dataclasses.dataclass
class TransactionAbortedError(CommandError):
    stage = Stage.TRANSACTION

    watched: collections.abc.Set[str]
    discarded: int

    def __str__(self) -> str:
        keys = ", ".join(sorted(self.watched)) or "<none>"
        return (
            f"Transaction aborted: a watched key changed ({keys}); "
            f"{self.discarded} queued command(s) discarded"
        )
