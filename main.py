import logging
import sys

from rich.logging import RichHandler
from rich.pretty import pprint

from argweave import *

__prog__ = "copy"


def build():
    parser = ArgumentParser("copy", "copies files into a destination folder")
    parser.add_argument("dest", "destination folder")
    parser.add_argument("files", "files to copy").set_multi_value_mode(OneOrMore())
    parser.add_argument("count", "how many copies of each file").add_name("-c").add_name("--count")
    parser.add_argument("exclude", "patterns to skip").add_name("--exclude").set_nargs(-3)
    parser.add_argument("verbose", "log every parsing step").add_name("-v").add_name("--verbose").set_nargs(0)
    return parser


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG if {"-v", "--verbose"} & set(sys.argv[1:]) else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )
    pprint(build().parse_or_exit().as_dict())
