"""Module containing session configuration."""

import collections.abc
import dataclasses
import os
import typing

from disguise import error

__all__: collections.abc.Sequence[str] = ("SessionConfig",)


_ENV_PREFIX: typing.Final = "DISGUISE_"
_TRUTHY: typing.Final = frozenset({"1", "true", "yes", "on"})
_FALSY: typing.Final = frozenset({"0", "false", "no", "off", ""})


@dataclasses.dataclass(frozen=True, slots=True)
class SessionConfig:
    """Options that shape how a session builds and dispatches commands.

    key_prefix:
        Prepended to every key argument, and to keyspace scan patterns.
    scan_count:
        Page-size hint sent with scans whose cursor does not set its own.
    log_commands:
        Emit a debug log record for every dispatched command.
    """

    key_prefix: str = ""
    scan_count: int | None = None
    log_commands: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.key_prefix, str):
            msg = f"key_prefix must be a str, got {self.key_prefix!r}"
            raise error.ArgumentShapeError(msg)

        if self.scan_count is not None and (
            isinstance(self.scan_count, bool) or not isinstance(self.scan_count, int) or self.scan_count < 1
        ):
            msg = f"scan_count must be a positive integer, got {self.scan_count!r}"
            raise error.ArgumentShapeError(msg)

        if not isinstance(self.log_commands, bool):
            msg = f"log_commands must be a bool, got {self.log_commands!r}"
            raise error.ArgumentShapeError(msg)

    @classmethod
    def option_names(cls) -> tuple[str, ...]:
        return tuple(field.name for field in dataclasses.fields(cls))

    @classmethod
    def from_mapping(cls, mapping: collections.abc.Mapping[str, typing.Any]) -> "SessionConfig":
        """Create a config from a mapping, rejecting unknown option names."""
        unknown = set(mapping) - set(cls.option_names())
        if unknown:
            raise error.UnknownOptionError("session", frozenset(unknown), cls.option_names())

        return cls(**mapping)

    @classmethod
    def from_env(cls, environ: collections.abc.Mapping[str, str] | None = None) -> "SessionConfig":
        """Create a config from ``DISGUISE_*`` environment variables.

        Variables that are not set keep their default.
        """
        environ = os.environ if environ is None else environ
        values: dict[str, typing.Any] = {}

        if (prefix := environ.get(f"{_ENV_PREFIX}KEY_PREFIX")) is not None:
            values["key_prefix"] = prefix

        if count := environ.get(f"{_ENV_PREFIX}SCAN_COUNT"):
            try:
                values["scan_count"] = int(count)
            except ValueError as exc:
                msg = f"{_ENV_PREFIX}SCAN_COUNT must be an integer, got {count!r}"
                raise error.ArgumentShapeError(msg) from exc

        if (log_commands := environ.get(f"{_ENV_PREFIX}LOG_COMMANDS")) is not None:
            folded = log_commands.strip().casefold()
            if folded not in _TRUTHY | _FALSY:
                msg = f"{_ENV_PREFIX}LOG_COMMANDS must be a boolean flag, got {log_commands!r}"
                raise error.ArgumentShapeError(msg)

            values["log_commands"] = folded in _TRUTHY

        return cls(**values)

    def with_option(self, name: str, value: typing.Any) -> "SessionConfig":  # noqa: ANN401
        """Return a copy of this config with a single option changed."""
        if name not in self.option_names():
            raise error.UnknownOptionError("session", frozenset({name}), self.option_names())

        return dataclasses.replace(self, **{name: value})
