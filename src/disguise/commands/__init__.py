"""Command family mixins combined by ``disguise.Session``."""

import collections.abc

from disguise.commands.base import *
from disguise.commands.bitmaps import *
from disguise.commands.geo import *
from disguise.commands.hashes import *
from disguise.commands.keys import *
from disguise.commands.lists import *
from disguise.commands.pubsub import *
from disguise.commands.scan import *
from disguise.commands.server import *
from disguise.commands.sets import *
from disguise.commands.sorted_sets import *
from disguise.commands.strings import *

__all__: collections.abc.Sequence[str] = (
    "CommandsBase",
    "Result",
    "BitmapCommands",
    "HyperLogLogCommands",
    "GeoCommands",
    "HashCommands",
    "KeyCommands",
    "ListCommands",
    "PubSubCommands",
    "ScriptingCommands",
    "ScanCommands",
    "ServerCommands",
    "SetCommands",
    "SortedSetCommands",
    "StringCommands",
)
