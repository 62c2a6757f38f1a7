"""A validated, typed command façade over a remote data-structure server."""

import collections.abc
import logging

from disguise.client import *
from disguise.command import *
from disguise.config import *
from disguise.cursor import Cursor
from disguise.error import *
from disguise.session import Queued
from disguise.transport import *
from disguise.validate import *

__all__: collections.abc.Sequence[str] = (
    # client
    "Client",
    "Session",
    # command
    "Command",
    # config
    "SessionConfig",
    # cursor
    "Cursor",
    # error
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
    # session
    "Queued",
    # transport
    "ExecuteCommandTransport",
    # validate
    "Direction",
    "Position",
    "ObjectSubcommand",
    "BitOperation",
    "Aggregate",
    "GeoUnit",
    "SortOrder",
    "SessionMode",
)

logging.getLogger(__name__).addHandler(logging.NullHandler())
