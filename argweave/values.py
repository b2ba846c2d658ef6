"""
Argweave parse results: parsed values, per-argument views, and the result container.

Overview
- ValueKind / ParsedValue
  • ParsedValue is a closed tagged variant over text, integer, float and boolean
    payloads, or empty. The engine itself only produces text; the other kinds
    exist so callers can commit already-converted values with the same API.
  • empty values (has_value() is False) stand for optional arguments that were
    not supplied.

- ParsedArgument
  • read-only view over the values committed for one argument: iterate it,
    take len(), ask value() for the first one, or texts() for all of them as strings.
  • supplied tells a matched zero-value switch apart from an absent one.

- ParseResult
  • outcome flags (should_exit, error_occurred) and message (help or error text).
  • flat value store addressed by (offset, count) records; positional records
    always come first, then named ones. Labels map to records.
  • commit_positional()/commit_named() append records; get(label) reads them back.
  • finalize() applies the conventional exit behaviour for command-line tools.

Outcome contract
- should_exit is False → parsing succeeded, query values by label.
- should_exit is True and error_occurred is False → message is help text (exit 0).
- should_exit is True and error_occurred is True → message is a diagnostic (exit 1).
"""
import sys
from enum import Enum
from typing import NamedTuple

from rich.console import Console

from .faults import ParseError, trigger
from .utils import Unset


class ValueKind(Enum):
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"


_TYPES = {
    ValueKind.TEXT: str,
    ValueKind.INTEGER: int,
    ValueKind.FLOAT: float,
    ValueKind.BOOLEAN: bool,
}


def _kindof(object, /):
    # bool is checked before int, it is an int subclass
    match object:
        case bool():
            return ValueKind.BOOLEAN
        case int():
            return ValueKind.INTEGER
        case float():
            return ValueKind.FLOAT
        case str():
            return ValueKind.TEXT
        case _:
            raise TypeError("parsed values must be text, integer, float, or boolean, not %r" % type(object).__name__)


def _askind(kind, /):
    if isinstance(kind, ValueKind):
        return kind
    for candidate, type in _TYPES.items():
        if kind is type:
            return candidate
    raise TypeError("value kind must be a ValueKind or one of str, int, float, bool")


class ParsedValue:
    """
    A possibly-absent, tagged single value.

    Construction
    - ParsedValue()        → empty (optional argument not supplied).
    - ParsedValue("text")  → ValueKind.TEXT, likewise for int/float/bool.

    Retrieval
    - get(kind)     → the payload; TypeError when empty or of another kind.
    - try_get(kind) → the payload, or None when empty or of another kind.
    - kind may be a ValueKind or the matching Python type (str, int, float, bool).
    """
    __slots__ = ("_kind", "_value")

    def __init__(self, value=Unset, /):
        self._kind = None if value is Unset else _kindof(value)
        self._value = value

    @property
    def kind(self):
        return self._kind

    def has_value(self):
        return self._kind is not None

    def __bool__(self):
        return self.has_value()

    def is_type(self, kind, /):
        return self._kind is _askind(kind)

    def get(self, kind=Unset, /):
        if not self.has_value():
            raise TypeError("parsed value is empty")
        if kind is not Unset and (kind := _askind(kind)) is not self._kind:
            raise TypeError("parsed value holds %s, not %s" % (self._kind.value, kind.value))
        return self._value

    def try_get(self, kind=Unset, /):
        try:
            return self.get(kind)
        except TypeError:
            return None

    def __eq__(self, other):
        if not isinstance(other, ParsedValue):
            return NotImplemented
        return self._kind is other._kind and self._value == other._value

    def __hash__(self):
        return hash((self._kind, self._value))

    def __str__(self):
        return "" if self._kind is None else str(self._value)

    def __repr__(self):
        if self._kind is None:
            return "ParsedValue()"
        return "ParsedValue(%r)" % self._value


class ParsedArgument:
    """
    Read-only view over one argument's parsed values.
    """
    __slots__ = ("_values", "_supplied")

    def __init__(self, values=(), /, supplied=True):
        self._values = tuple(values)
        self._supplied = bool(supplied)

    @property
    def supplied(self):
        """
        True when the argument appeared in the parsed tokens (even without values).
        """
        return self._supplied

    @property
    def values(self):
        return self._values

    def value_count(self):
        return len(self._values)

    def has_value(self):
        return bool(self._values)

    def value(self):
        """
        The first value, or an empty ParsedValue when none were provided.
        """
        return self._values[0] if self._values else ParsedValue()

    def texts(self):
        return [str(value) for value in self._values]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __bool__(self):
        return self.has_value()

    def __getitem__(self, index):
        return self._values[index]

    def __repr__(self):
        return "ParsedArgument(%r, supplied=%r)" % (list(self._values), self._supplied)


class _Record(NamedTuple):
    offset: int
    count: int
    supplied: bool


class ParseResult:
    """
    Result of one parse: outcome flags, message and the committed values.

    Storage
    - _values: flat list of ParsedValue.
    - _records: one (offset, count, supplied) per committed argument; positional
      records first, named records after them.
    - _labels: label -> record index.
    """

    def __init__(self, should_exit=False, error_occurred=False, message="", /, *, fault=None, renderable=None):
        self._should_exit = bool(should_exit)
        self._error_occurred = bool(error_occurred)
        self._message = message
        self._fault = fault
        self._renderable = renderable
        self._values = []
        self._records = []
        self._labels = {}
        self._positionals = 0

    @property
    def should_exit(self):
        return self._should_exit

    @property
    def error_occurred(self):
        return self._error_occurred

    @property
    def message(self):
        return self._message

    @property
    def fault(self):
        """
        The ParseError behind message when error_occurred is True, None otherwise.
        """
        return self._fault

    def _commit(self, values, label, supplied):
        if label and label in self._labels:
            raise ValueError("argument label %r was already committed" % label)
        values = [value if isinstance(value, ParsedValue) else ParsedValue(value) for value in values]
        self._records.append(_Record(len(self._values), len(values), bool(supplied)))
        self._values.extend(values)
        if label:
            self._labels[label] = len(self._records) - 1

    def commit_positional(self, values, label="", /, *, supplied=True):
        """
        Append the values of the next positional argument.

        All positional arguments must be committed before any named one; pass
        no values (and supplied=False) for an optional positional that was absent.
        """
        if self._positionals != len(self._records):
            raise ValueError("positional arguments must be committed before named arguments")
        self._commit(values, label, supplied)
        self._positionals += 1

    def commit_named(self, values, label, /, *, supplied=True):
        """
        Append the values of a named argument under a required, non-empty label.
        """
        if not isinstance(label, str) or not label:
            raise ValueError("named arguments must be committed with a non-empty label")
        self._commit(values, label, supplied)

    def _view(self, index):
        offset, count, supplied = self._records[index]
        return ParsedArgument(self._values[offset:offset + count], supplied=supplied)

    def get(self, label, /):
        """
        Return the ParsedArgument committed under `label`.

        raises KeyError when no argument with that label was declared; a declared
        optional argument that was not supplied yields an empty view instead.
        """
        try:
            index = self._labels[label]
        except KeyError:
            raise KeyError("no argument labelled %r" % label) from None
        return self._view(index)

    def positional(self, index, /):
        """
        Return the index-th positional argument (labelled or not).
        """
        if not 0 <= index < self._positionals:
            raise IndexError("positional argument index out of range")
        return self._view(index)

    def __getitem__(self, label):
        return self.get(label)

    def __contains__(self, label):
        return label in self._labels

    def labels(self):
        return list(self._labels)

    def as_dict(self):
        """
        Map every label to the list of its raw payloads.
        """
        return {label: [value.try_get() for value in self._view(index)] for label, index in self._labels.items()}

    def finalize(self, *, colorful=True, fancy=False):
        """
        Apply the conventional exit behaviour and return self on success.

        - help requested → help printed on stdout, SystemExit(0).
        - parse error    → fault rendered on stderr, SystemExit(1).
        - success        → returns this result unchanged.
        """
        if not self._should_exit:
            return self
        if self._error_occurred:
            fault = self._fault if self._fault is not None else ParseError(self._message)
            trigger(fault, shell=True, colorful=colorful, fancy=fancy)
        console = Console(no_color=not colorful, highlight=False)
        if colorful and self._renderable is not None:
            console.print(self._renderable)
        else:
            console.print(self._message, markup=False)
        sys.exit(0)

    def __rich_repr__(self):
        yield "should_exit", self._should_exit
        yield "error_occurred", self._error_occurred
        yield "message", self._message
        for label, index in self._labels.items():
            yield label, self._view(index)

    def __repr__(self):
        return "ParseResult(should_exit=%r, error_occurred=%r, labels=%r)" % (
            self._should_exit, self._error_occurred, self.labels()
        )


__all__ = (
    "ValueKind",
    "ParsedValue",
    "ParsedArgument",
    "ParseResult",
)
