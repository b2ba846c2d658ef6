"""
Argweave faults (configuration errors and parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault the engine
  can report. Codes are grouped by tier to keep copy consistent and make
  logs/searches predictable.
- ConfigurationError: programmer mistakes in how a parser was declared (bad
  option names, ordering violations, collisions). Raised eagerly; never caused
  by end-user input.
- ParseError: end-user mistakes in the token stream (unknown option, missing
  values). Raised inside the matcher and turned into data by the parser.
- trigger(): central entry point to surface a fault (raise, or render and exit).

UX goals
- Position-first messages: parse errors name the ordinal position of the token
  that caused them (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - parse errors (11xxx): produced by end-user input, returned as data.
      • UNKNOWN_OPTION, DUPLICATED_OPTION, TOO_MANY_POSITIONALS,
        NOT_ENOUGH_VALUES, AT_LEAST_ONE_VALUE_REQUIRED, MISSING_POSITIONALS
    - configuration errors (21xxx): produced by the program declaring the parser.
      • INVALID_OPTION_NAME, MIXED_NAMES, REQUIRED_NAMED_ARGUMENT,
        POSITIONAL_ORDER, DUPLICATED_NAME, MULTIPLE_HELPERS, DUPLICATED_LABEL,
        EMPTY_POSITIONAL, STALE_HANDLE, FROZEN_PARSER
    """
    # --- parse errors (11xxx) ---
    UNKNOWN_OPTION              = 11112
    DUPLICATED_OPTION           = 11115
    AT_LEAST_ONE_VALUE_REQUIRED = 11119
    TOO_MANY_POSITIONALS        = 11121
    NOT_ENOUGH_VALUES           = 11122
    MISSING_POSITIONALS         = 11125

    # --- configuration errors (21xxx) ---
    INVALID_OPTION_NAME         = 21111
    MIXED_NAMES                 = 21112
    REQUIRED_NAMED_ARGUMENT     = 21113
    POSITIONAL_ORDER            = 21121
    EMPTY_POSITIONAL            = 21122
    DUPLICATED_NAME             = 21131
    DUPLICATED_LABEL            = 21132
    MULTIPLE_HELPERS            = 21133
    STALE_HANDLE                = 21141
    FROZEN_PARSER               = 21142

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class Fault(Exception):
    """
    base type for every argweave fault.

    a fault carries a lowercase one-sentence message plus an immutable bag of
    options (code, title, hint and any context such as the offending token).
    __replace__ supports copy.replace(fault, **overrides) so presentation
    options can be merged late by trigger().
    """
    __palette__ = {}
    __status__ = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return coalesce(self.message, "")

    @property
    def code(self):
        return self.options.get("code")

    @property
    def hint(self):
        return self.options.get("hint")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, type(self).__palette__ | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "argweave")), styler("prog-name"))
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code, styler("code")),
            " | ",
            text(self.options.get("title", type(self).__name__).title(), styler("title")),
            " ]"
        )
        message = text(str(self), styler("message"))
        parts = [message]
        if self.hint:
            parts.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.hint, styler("hint"))))

        if fancy:
            return Panel(Group(*parts), title=header, title_align="left")

        return Group(header, *parts)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(type(self).__status__)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ConfigurationError(Fault):
    """
    a defect in how a parser was declared.

    these can never be produced by end-user input; they are raised while
    building definitions or when parsing begins, and the outermost caller
    decides whether to terminate (see ArgumentParser.parse_or_exit).
    """
    __status__ = 2
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #FFB400",  # amber fault code
        "title": "bold #FF4D4D",  # red title, this is a programming error
        "message": "#C8C8D0",
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",
    }


class InvalidOptionNameError(ConfigurationError): ...
class MixedNamesError(ConfigurationError): ...
class RequiredNamedArgumentError(ConfigurationError): ...
class PositionalOrderError(ConfigurationError): ...
class EmptyPositionalError(ConfigurationError): ...
class DuplicatedNameError(ConfigurationError): ...
class DuplicatedLabelError(ConfigurationError): ...
class MultipleHelpersError(ConfigurationError): ...
class StaleHandleError(ConfigurationError): ...
class FrozenParserError(ConfigurationError): ...


class ParseError(Fault):
    """
    a defect in the user-supplied token stream.

    raised by the token matcher and converted into a ParseResult with
    error_occurred=True by the parser; callers never see it raised unless they
    drive the matcher directly.
    """
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "title": "bold #FF4DA6",  # friendly pinky title
        "message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    }


class UnknownOptionError(ParseError): ...
class DuplicatedOptionError(ParseError): ...
class TooManyPositionalsError(ParseError): ...
class NotEnoughValuesError(ParseError): ...
class AtLeastOneValueRequiredError(ParseError): ...
class MissingPositionalsError(ParseError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see Fault).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - with shell=True the fault is rendered on stderr and the process exits with the
      fault's status (1 for parse errors, 2 for configuration errors); otherwise the
      fault is raised.

    typical options
    - shell, fancy, colorful, prog, and any context the renderer may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "Fault",
    "ConfigurationError",
    "InvalidOptionNameError",
    "MixedNamesError",
    "RequiredNamedArgumentError",
    "PositionalOrderError",
    "EmptyPositionalError",
    "DuplicatedNameError",
    "DuplicatedLabelError",
    "MultipleHelpersError",
    "StaleHandleError",
    "FrozenParserError",
    "ParseError",
    "UnknownOptionError",
    "DuplicatedOptionError",
    "TooManyPositionalsError",
    "NotEnoughValuesError",
    "AtLeastOneValueRequiredError",
    "MissingPositionalsError",
    "trigger",
)
