from enum import IntEnum

from rich.pretty import pprint

from sextant import *


class Color(IntEnum):
    RED = 0
    GREEN = 1
    BLUE = 2
    BLACK = 3


COLORS = {color.name: color.value for color in (Color.RED, Color.GREEN, Color.BLUE)}

parser = Parser("demo", "sextant demonstration", shell=True, hard_exit=True)

parser.option("l", "logging", "set the log path", default="")
parser.vector("L", "loggings", "set the log path")
parser.flag("i", "interfaces", "set the interface")
parser.positional("s", "positionals", "some positionals")
parser.enum("e", "enum", "an enum", COLORS, default=Color.RED)
parser.enums("E", "enums", "enums", COLORS)


if __name__ == '__main__':
    parser.print_help()
    pprint(parser.parse())
