"""
Argweave token matcher: the single-pass parse engine.

State machine
- IDLE: not collecting values. The next token starts a match:
  • a syntactically valid option name is looked up in the registry (unknown
    names fail) and consumed as the match marker;
  • anything else claims the next positional slot and is then collected as
    that slot's first value.
- ACCUMULATING: collecting values for one definition. For each token:
  • the mode is full (Fixed(n) with n values, Variable(max) with max values)
    → the match is finished and the same token is re-evaluated from IDLE;
  • the token is a valid option name → the mode's sufficiency check runs, the
    match is finished and the token is re-evaluated from IDLE;
  • otherwise the token is appended as a value.
- DONE: input exhausted. The open match gets the same sufficiency check and
  any required positional left unclaimed is reported.

Boundaries
- Any token that is syntactically an option name closes the current match,
  registered or not; an unregistered one then fails from IDLE.
- No token is consumed twice; finishing a match never advances the cursor.

Failures are raised as ParseError subclasses carrying the 1-based ordinal
position of the offending token; the parser turns them into result data.
"""
import difflib
import logging
from dataclasses import dataclass, field
from enum import Enum

from .definitions import Fixed, OneOrMore, is_option_name
from .faults import *
from .utils import ordinal

logger = logging.getLogger(__name__)


class State(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    DONE = "done"


@dataclass
class RawMatch:
    """
    One finished (or in-progress) match.

    - definition: the matched ArgumentDefinition.
    - name: alias used to invoke it, or the metalabel for positional matches.
    - values: literal value tokens, in order.
    - index: 1-based position of the token that started the match.
    """
    definition: object
    name: str
    index: int
    values: list = field(default_factory=list)


class TokenMatcher:
    """
    Walk a token list once against a NameRegistry.

    Usage
        matches = TokenMatcher(registry).match(tokens)

    A matcher instance can be reused; every call to match() starts from IDLE.
    """

    def __init__(self, registry, /):
        self.registry = registry
        self.state = State.IDLE
        self._current = None
        self._finished = []

    def match(self, tokens, /):
        """
        Return the ordered list of RawMatch produced by `tokens`.

        raises ParseError subclasses on user input mistakes.
        """
        tokens = list(tokens)
        slots = list(self.registry.positionals)
        claimed = 0
        seen = set()

        self.state = State.IDLE
        self._current = None
        self._finished = []

        cursor = 0
        while cursor < len(tokens):
            token = tokens[cursor]
            position = cursor + 1

            if self.state is State.IDLE:
                if is_option_name(token):
                    definition = self._lookup(token, position)
                    if definition in seen:
                        raise DuplicatedOptionError(
                            'option "%s" at %s position was already provided' % (token, ordinal(position)),
                            title="duplicated option",
                            code=FaultCode.DUPLICATED_OPTION,
                            hint="keep a single occurrence of each option",
                            input=token,
                            index=position,
                        )
                    seen.add(definition)
                    self._begin(RawMatch(definition, token, position))
                    cursor += 1
                else:
                    if claimed >= len(slots):
                        raise TooManyPositionalsError(
                            'too many positional arguments: unexpected "%s" at %s position, expected at most %d' % (
                                token, ordinal(position), len(slots)
                            ),
                            title="too many positional arguments",
                            code=FaultCode.TOO_MANY_POSITIONALS,
                            hint="remove this extra value",
                            input=token,
                            index=position,
                        )
                    definition = slots[claimed]
                    claimed += 1
                    # the cursor stays put: the token is this slot's first value
                    self._begin(RawMatch(definition, definition._metalabel, position))
                continue

            current = self._current
            if current.definition._mode.is_full(len(current.values)):
                self._finish()
            elif is_option_name(token):
                self._check(current)
                self._finish()
            else:
                current.values.append(token)
                cursor += 1

        if self.state is State.ACCUMULATING:
            self._check(self._current)
            self._finish()
        self.state = State.DONE

        missing = [definition for definition in slots[claimed:] if not definition._is_optional]
        if missing:
            raise MissingPositionalsError(
                "missing required positional arguments: %s" % ", ".join(
                    "<%s>" % definition._metalabel for definition in missing
                ),
                title="missing positional arguments",
                code=FaultCode.MISSING_POSITIONALS,
                hint="add the missing values in the order shown by --help",
                missing=tuple(definition._metalabel for definition in missing),
            )

        return self._finished

    def _lookup(self, token, position):
        if (definition := self.registry.lookup(token)) is not None:
            return definition
        suggestions = difflib.get_close_matches(token, self.registry.names.keys(), 5)
        if suggestions:
            hint = "did you mean %r?" % suggestions[0]
        else:
            hint = "run with --help to see all available options"
        raise UnknownOptionError(
            'found unrecognized option "%s" at %s position' % (token, ordinal(position)),
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint=hint,
            input=token,
            index=position,
            suggestions=suggestions,
        )

    def _begin(self, match):
        self._current = match
        self.state = State.ACCUMULATING

    def _finish(self):
        match = self._current
        logger.debug("matched %s with %d value(s)", match.name, len(match.values))
        self._finished.append(match)
        self._current = None
        self.state = State.IDLE

    def _check(self, match):
        """
        Apply the sufficiency rule of the match's mode before finishing it.
        """
        mode = match.definition._mode
        received = len(match.values)
        if mode.is_enough(received):
            return
        if isinstance(mode, Fixed):
            raise NotEnoughValuesError(
                'argument "%s" at %s position expects %d values but only %d were provided' % (
                    match.name, ordinal(match.index), mode.count, received
                ),
                title="not enough values",
                code=FaultCode.NOT_ENOUGH_VALUES,
                hint="pass exactly %d value(s) after %s" % (mode.count, match.name),
                input=match.name,
                index=match.index,
            )
        if isinstance(mode, OneOrMore):
            raise AtLeastOneValueRequiredError(
                'argument "%s" at %s position expects at least one value but none were provided' % (
                    match.name, ordinal(match.index)
                ),
                title="value required",
                code=FaultCode.AT_LEAST_ONE_VALUE_REQUIRED,
                hint="pass one or more values after %s" % match.name,
                input=match.name,
                index=match.index,
            )
        raise RuntimeError("unexpected multi-value mode %r" % mode)


__all__ = (
    "State",
    "RawMatch",
    "TokenMatcher",
)
