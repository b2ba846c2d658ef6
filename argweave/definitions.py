r"""
Argweave argument definitions, multi-value modes and the definition handle.

Overview
- Multi-value modes (closed set, immutable)
  • Fixed(count): exactly `count` values each time the argument is matched.
  • Variable(maximum): zero to `maximum` values, consumed greedily.
  • OneOrMore(): at least one value, otherwise unbounded.
  • mode_from_nargs(count, at_least_one=False): integer encoding of the above
    (negative counts mean "up to -count").

- Option-name grammar
  • one or two leading dashes, then at least one non-dash character;
  • a single leading dash is followed by exactly one character ("-h");
  • a double dash may be followed by any text ("--help").
  check_option_name() reports the broken rule, is_option_name() is the predicate
  the token matcher uses to detect boundaries.

- ArgumentDefinition
  • declarative model of one argument, owned by a parser's definition store.
  • exposes read-only properties (see __introspectable__); only an
    ArgumentHandle mutates it, and only while the owning parser is still being built.

- ArgumentHandle
  • fluent, single-use view onto one definition: set_label, set_description,
    set_metalabel, add_name, set_multi_value_mode, set_nargs, set_optional.
  • holds a weak reference to the parser plus the definition's index; using it
    after the parser is gone or frozen raises a configuration error.

Quick example:
    >>> parser = ArgumentParser("tool")
    >>> parser.add_argument("count", "how many times").add_name("-c").add_name("--count")
    >>> parser.add_argument("files").set_multi_value_mode(OneOrMore())
"""
import functools
import operator
import re
import weakref
from dataclasses import dataclass

from .faults import *
from .utils import *


_NARGS_LIMIT = 255

HELP_NAMES = ("-h", "--help")


@dataclass(frozen=True, slots=True)
class Fixed:
    """
    exactly `count` values are required each time the argument is matched.

    Fixed(0) is a presence-only switch (the built-in help option uses it).
    """
    count: int

    def __post_init__(self):
        if not isinstance(self.count, int) or isinstance(self.count, bool):
            raise TypeError("Fixed() count must be an integer")
        if not 0 <= self.count <= _NARGS_LIMIT:
            raise ValueError("Fixed() count must be between 0 and %d" % _NARGS_LIMIT)

    def is_enough(self, received, /):
        return received >= self.count

    def is_full(self, received, /):
        return received >= self.count

    def __str__(self):
        return str(self.count)


@dataclass(frozen=True, slots=True)
class Variable:
    """
    zero to `maximum` values, consumed greedily until the next option token,
    the end of input, or `maximum` values have been collected.
    """
    maximum: int

    def __post_init__(self):
        if not isinstance(self.maximum, int) or isinstance(self.maximum, bool):
            raise TypeError("Variable() maximum must be an integer")
        if not 1 <= self.maximum <= _NARGS_LIMIT:
            raise ValueError("Variable() maximum must be between 1 and %d" % _NARGS_LIMIT)

    def is_enough(self, received, /):
        return True

    def is_full(self, received, /):
        return received >= self.maximum

    def __str__(self):
        return "0..%d" % self.maximum


@dataclass(frozen=True, slots=True)
class OneOrMore:
    """
    at least one value, otherwise unbounded.
    """

    def is_enough(self, received, /):
        return received >= 1

    def is_full(self, received, /):
        return False

    def __str__(self):
        return "1.."


def mode_from_nargs(count, at_least_one=False, /):
    """
    translate an integer value-count into a multi-value mode.

    encoding
    - at_least_one=True          → OneOrMore() (count must be >= 0 and is otherwise ignored)
    - count >= 0                 → Fixed(count)
    - count < 0                  → Variable(-count)

    counts outside ±255 are rejected with ValueError.
    """
    if not isinstance(count, int) or isinstance(count, bool):
        raise TypeError("nargs count must be an integer")
    if not -_NARGS_LIMIT <= count <= _NARGS_LIMIT:
        raise ValueError("nargs count must be between -%d and %d" % (_NARGS_LIMIT, _NARGS_LIMIT))
    if at_least_one:
        if count < 0:
            raise ValueError("nargs count cannot be negative when at least one value is required")
        return OneOrMore()
    if count >= 0:
        return Fixed(count)
    return Variable(-count)


def check_option_name(name, /):
    """
    return the rule a candidate option name breaks, or None when it is valid.

    rules (checked in order)
    - must start with '-' or '--'
    - must contain text after '-' or '--'
    - must only begin with '-' or '--' (three or more dashes are rejected)
    - a single '-' must be followed by a single character
    """
    if not name.startswith("-"):
        return "must start with '-' or '--'"
    start = len(name) - len(name.lstrip("-"))
    if start == len(name):
        return "must contain text after '-' or '--'"
    if start > 2:
        return "must only begin with '-' or '--'"
    if start == 1 and len(name) > 2:
        return "must be followed by a single character when starting with '-'"
    return None


def is_option_name(token, /):
    """
    True when `token` is syntactically an option name (registered or not).
    """
    return isinstance(token, str) and check_option_name(token) is None


def _quoted(names):
    return ", ".join('"%s"' % name for name in names)


def _assert_option_name(name, /, names=(), *, adding=Unset):
    """
    raise InvalidOptionNameError when `name` breaks the option-name grammar.

    - names: names already added to the definition; named in the message.
    - adding: when re-validating an existing name, the new name whose addition
      triggered the check.
    """
    if (rule := check_option_name(name)) is None:
        return
    if adding is Unset:
        message = 'invalid option name "%s", it %s' % (name, rule)
    else:
        message = 'cannot add option name "%s", existing name "%s" isn\'t valid, it %s' % (adding, name, rule)
    if names:
        message += " (existing names: %s)" % _quoted(names)
    raise InvalidOptionNameError(
        message,
        title="invalid option name",
        code=FaultCode.INVALID_OPTION_NAME,
        hint="use '-x' for short options and '--name' for long ones",
        name=name,
        names=tuple(names),
    )


class DefinitionType(type):
    """
    Metaclass that exposes selected fields as read-only properties.

    Responsibilities
    - Wire a mirror() property for every name listed in __introspectable__,
      backed by the "_<name>" attribute.
    - Provide stable __repr__/__rich_repr__ implementations for diagnostics.
    - Derive __typename__ from the class name (camel-case split with hyphens).
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


class ArgumentDefinition(metaclass=DefinitionType):
    """
    Declarative model of one positional or named argument.

    Fields (read-only here; mutate through an ArgumentHandle)
    - label: programmer-facing identifier used for result lookup ("" when unset).
    - names: ordered aliases; empty for positional arguments.
    - metalabel: display text for help; "" until resolved, then frozen.
    - description: help text.
    - is_optional / is_positional: see the module overview.
    - mode: Fixed | Variable | OneOrMore, Fixed(1) by default.
    """
    __introspectable__ = (
        "label",
        "names",
        "metalabel",
        "description",
        "is_optional",
        "is_positional",
        "mode",
    )

    def __init__(self, label="", description="", /):
        self._label = label
        self._names = []
        self._metalabel = ""
        self._description = description
        self._is_optional = False
        self._is_positional = True
        self._mode = Fixed(1)

    @property
    def is_named(self):
        return not self._is_positional

    @property
    def is_help(self):
        """
        True for a named definition answering to '-h' or '--help'.
        """
        return self.is_named and any(name in HELP_NAMES for name in self._names)


class ArgumentHandle:
    """
    Fluent builder over a single definition of an ArgumentParser.

    A handle is a view, not an owner: it keeps the parser weakly and addresses
    the definition by index. It must be used right after add_argument() and
    never stored; once the parser is garbage collected, or frozen by its first
    parse, every operation raises a configuration error.
    """
    __slots__ = ("_parser", "_index")

    def __init__(self, parser, index, /):
        self._parser = weakref.ref(parser)
        self._index = index

    def _definition(self):
        if (parser := self._parser()) is None:
            raise StaleHandleError(
                "argument handle outlived its parser",
                title="stale handle",
                code=FaultCode.STALE_HANDLE,
                hint="configure each argument right after add_argument(); do not store handles",
            )
        if parser.frozen:
            raise FrozenParserError(
                "parser %r cannot be changed once parsing has begun" % parser.name,
                title="frozen parser",
                code=FaultCode.FROZEN_PARSER,
                hint="declare every argument before the first parse",
            )
        try:
            return parser._definitions[self._index]
        except IndexError:
            raise StaleHandleError(
                "argument handle points past the parser's definitions",
                title="stale handle",
                code=FaultCode.STALE_HANDLE,
                hint="configure each argument right after add_argument(); do not store handles",
            ) from None

    @property
    def definition(self):
        """
        The definition this handle configures (read-only view).
        """
        return self._definition()

    def set_label(self, label, /):
        """
        Set the label used to look the argument up in a ParseResult.

        Does not affect whether the argument is positional or named.
        """
        if not isinstance(label, str):
            raise TypeError("argument label must be a string")
        self._definition()._label = label
        return self

    def set_description(self, description, /):
        if not isinstance(description, str):
            raise TypeError("argument description must be a string")
        self._definition()._description = description
        return self

    def set_metalabel(self, metalabel, /):
        """
        Override the display text used in help (wins over names and label).
        """
        if not isinstance(metalabel, str):
            raise TypeError("argument metalabel must be a string")
        self._definition()._metalabel = metalabel
        return self

    def add_name(self, name, /):
        """
        Add an alias to the argument.

        behavior
        - a name starting with '-' must satisfy the option-name grammar. the first
          such name turns the argument into a named (optional) argument, after
          re-validating every name added before it.
        - a name without a leading dash cannot be added to a named argument.
        - the name is appended once validation passes.
        """
        if not isinstance(name, str):
            raise TypeError("argument name must be a string")
        definition = self._definition()

        if name.startswith("-"):
            _assert_option_name(name, definition._names)
            if definition._is_positional:
                for existing in definition._names:
                    _assert_option_name(existing, definition._names, adding=name)
                definition._is_optional = True
                definition._is_positional = False
        elif definition.is_named:
            raise MixedNamesError(
                'cannot add name "%s" to a named argument, every name must start with \'-\' or \'--\''
                ' (existing names: %s)' % (name, _quoted(definition._names)),
                title="mixed argument names",
                code=FaultCode.MIXED_NAMES,
                hint="use '-%s' or '--%s' instead" % (name[:1], name),
                name=name,
                names=tuple(definition._names),
            )

        definition._names.append(name)
        return self

    def set_multi_value_mode(self, mode, /):
        """
        Set how many value tokens one match of this argument consumes.
        """
        if not isinstance(mode, Fixed | Variable | OneOrMore):
            raise TypeError("multi-value mode must be Fixed, Variable, or OneOrMore")
        self._definition()._mode = mode
        return self

    def set_nargs(self, count, at_least_one=False, /):
        """
        Integer shorthand for set_multi_value_mode(), see mode_from_nargs().
        """
        return self.set_multi_value_mode(mode_from_nargs(count, at_least_one))

    def set_optional(self, optional=True, /):
        """
        Mark the argument as optional (or required).

        Positional arguments become optional this way; named arguments are
        optional by construction, and marking one required fails when parsing begins.
        """
        self._definition()._is_optional = bool(optional)
        return self


__all__ = (
    # Multi-value modes
    "Fixed",
    "Variable",
    "OneOrMore",
    "mode_from_nargs",

    # Option-name grammar
    "check_option_name",
    "is_option_name",
    "HELP_NAMES",

    # Definition model
    "ArgumentDefinition",
    "ArgumentHandle",
)
