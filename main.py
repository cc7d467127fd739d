import sys
from dataclasses import dataclass
from enum import Enum

from rich.pretty import pprint

from typeflag import *


class Mode(Enum):
    fast = 1
    safe = 2


@dataclass
class Options:
    path: str | None
    count: u32
    mode: Mode
    verbose: bool


Seen = record(Options, bool, False)
Given = record(Options, object, None)


if __name__ == '__main__':
    declared = options(Options)
    aliases = {field[0]: field for field in declared}
    seen, given = Seen(), Given()

    with guard(fancy=True):
        for token in sys.argv[1:]:
            field = aliases.get(key := name(token), key)
            if field not in declared:
                continue
            if declared[field] == boolean:
                setattr(given, field, parse_value(boolean, field, value(token)))
            else:
                setattr(given, field, parse_arg(declared[field], token))
            setattr(seen, field, True)

    pprint(seen)
    pprint(given)
