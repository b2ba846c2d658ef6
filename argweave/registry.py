"""
Argweave name registry: the pre-parse resolution pass.

What happens before any token is matched
1. resolve_metalabels(): every definition gets its display name, once.
   Fallback order: explicit metalabel → names joined with '|' → label → "arg<N>"
   (N counts positional definitions from zero).
2. NameRegistry.build(): the definition store is split into an ordered list of
   positional definitions and an alias → definition map, enforcing
   • optional positionals are never followed by required ones,
   • every positional accepts at least one value,
   • every named argument is optional,
   • no alias is declared twice,
   • labels are unique (unlabelled named arguments count under their metalabel),
   • at most one help definition ('-h' / '--help') exists.

Any violation is a ConfigurationError: the parser was declared wrongly, no user
input can fix it. The registry is rebuilt on every parse; given an unchanged
definition store the outcome is identical each time.
"""
import logging
from types import MappingProxyType

from .definitions import Fixed
from .faults import *

logger = logging.getLogger(__name__)


def resolve_metalabels(definitions, /):
    """
    Resolve the metalabel of every definition that does not have one yet.

    Already-resolved metalabels are left untouched, which makes the pass
    idempotent. Returns the resolved metalabels in definition order.
    """
    positionals = 0
    for definition in definitions:
        if not definition._metalabel:
            if definition._names:
                definition._metalabel = "|".join(definition._names)
            elif definition._label:
                definition._metalabel = definition._label
            else:
                definition._metalabel = "arg%d" % positionals
        if definition._is_positional:
            positionals += 1
    return [definition._metalabel for definition in definitions]


class NameRegistry:
    """
    Lookup structures derived from a finalized definition store.

    Attributes
    - positionals: tuple of positional definitions in declaration order.
    - names: read-only mapping alias → named definition.
    - helper: the help definition, or None.
    - required: how many positional definitions are required.
    """
    __slots__ = ("positionals", "names", "helper", "required")

    def __init__(self, positionals, names, helper, required, /):
        self.positionals = tuple(positionals)
        self.names = MappingProxyType(dict(names))
        self.helper = helper
        self.required = required

    @classmethod
    def build(cls, definitions, /):
        resolve_metalabels(definitions)

        positionals = []
        names = {}
        labels = {}
        helper = None
        required = 0
        optional = None  # first optional positional seen

        for definition in definitions:
            # named arguments without a label are stored under their metalabel
            if label := definition._label or (definition._metalabel if definition.is_named else ""):
                if label in labels:
                    raise DuplicatedLabelError(
                        'multiple arguments with the label "%s"' % label,
                        title="duplicated label",
                        code=FaultCode.DUPLICATED_LABEL,
                        hint="give every argument its own label",
                        label=label,
                    )
                labels[label] = definition

            if definition._is_positional:
                if definition._mode == Fixed(0):
                    raise EmptyPositionalError(
                        'positional argument "%s" must accept at least one value' % definition._metalabel,
                        title="empty positional",
                        code=FaultCode.EMPTY_POSITIONAL,
                        hint="use a named argument for switches without values",
                        definition=definition,
                    )
                if not definition._is_optional:
                    required += 1
                    if optional is not None:
                        raise PositionalOrderError(
                            'positional argument "%s" must be optional as it follows an optional positional argument "%s"' % (
                                definition._metalabel, optional._metalabel
                            ),
                            title="positional order",
                            code=FaultCode.POSITIONAL_ORDER,
                            hint="declare required positional arguments before optional ones",
                            definition=definition,
                        )
                elif optional is None:
                    optional = definition
                positionals.append(definition)
                continue

            if not definition._is_optional:
                raise RequiredNamedArgumentError(
                    'named argument "%s" must be optional' % definition._metalabel,
                    title="required named argument",
                    code=FaultCode.REQUIRED_NAMED_ARGUMENT,
                    hint="use a positional argument for values that must be present",
                    definition=definition,
                )

            if definition.is_help:
                if helper is not None:
                    raise MultipleHelpersError(
                        'arguments "%s" and "%s" both declare a help option' % (helper._metalabel, definition._metalabel),
                        title="multiple help options",
                        code=FaultCode.MULTIPLE_HELPERS,
                        hint="only one argument may be named '-h' or '--help'",
                        definition=definition,
                    )
                helper = definition

            for name in definition._names:
                if name in names:
                    raise DuplicatedNameError(
                        'multiple arguments with the name "%s"' % name,
                        title="duplicated name",
                        code=FaultCode.DUPLICATED_NAME,
                        hint="every alias must belong to a single argument",
                        name=name,
                    )
                names[name] = definition

        logger.debug(
            "registry built: %d positional (%d required), %d names, help=%s",
            len(positionals), required, len(names), helper is not None,
        )
        return cls(positionals, names, helper, required)

    def lookup(self, name, /):
        """
        Return the named definition answering to `name`, or None.
        """
        return self.names.get(name)

    def __contains__(self, name):
        return name in self.names

    def is_help(self, token, /):
        return self.helper is not None and token in self.helper._names


__all__ = (
    "resolve_metalabels",
    "NameRegistry",
)
