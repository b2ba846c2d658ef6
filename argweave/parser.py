"""
Argweave argument parser: the public facade.

Lifecycle
1. Build: ArgumentParser(name, description) then add_argument() for every
   argument, configured through the returned ArgumentHandle. A help argument
   ('-h' / '--help') is registered up front; adding an argument labelled
   "help" replaces it.
2. Parse: any parse_args*() call freezes the parser, builds the name registry
   (configuration errors are raised here), answers help requests, runs the
   token matcher and commits every match into a ParseResult.
3. Query: branch on result.should_exit / result.error_occurred, then read
   values with result.get(label).

Invocation surfaces
- parse_args_no_execute_filename(tokens): tokens never include argv[0].
- parse_args(tokens=Unset): tokens may start with the running program's path,
  which is stripped; Unset reads sys.argv.
- parse_argv(argc, argv): C-style count + vector pair.
- parse_or_exit(tokens=Unset): parse_args() plus the conventional exit
  behaviour (help → 0, parse error → 1, configuration error → 2).

Quick example:
    >>> parser = ArgumentParser("copy", "copies a file")
    >>> parser.add_argument("source")
    >>> parser.add_argument("dest").set_optional()
    >>> parser.add_argument("count").add_name("-c").add_name("--count")
    >>> result = parser.parse_args_no_execute_filename(["a.txt", "-c", "3"])
    >>> result.get("count").value().get(str)
    '3'
"""
import copy
import logging
import sys

from .definitions import *
from .executable import strip_executable
from .faults import *
from .help import generate_help_text, render_help
from .matcher import TokenMatcher
from .registry import NameRegistry, resolve_metalabels
from .utils import Unset
from .values import ParseResult

logger = logging.getLogger(__name__)


class ArgumentParser:
    """
    Declarative command-line parser.

    Parameters
    - name: program name shown in the usage line and in fault headers.
    - description: optional paragraph shown under the usage line.
    - colorful / fancy: presentation options forwarded to help and fault rendering.
    """

    def __init__(self, name, description="", /, *, colorful=True, fancy=False):
        if not isinstance(name, str):
            raise TypeError("ArgumentParser() name must be a string")
        if not isinstance(description, str):
            raise TypeError("ArgumentParser() description must be a string")

        self._name = name
        self._description = description
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self._definitions = []
        self._frozen = False
        self._autohelp = None

        self.add_argument("help", "Displays the help message").add_name("-h").add_name("--help").set_nargs(0)
        self._autohelp = len(self._definitions) - 1

    @property
    def name(self):
        return self._name

    @property
    def description(self):
        return self._description

    @property
    def colorful(self):
        return self._colorful

    @property
    def fancy(self):
        return self._fancy

    @property
    def frozen(self):
        """
        True once parsing has begun; definitions can no longer change.
        """
        return self._frozen

    @property
    def definitions(self):
        return tuple(self._definitions)

    def add_argument(self, label, description="", /):
        """
        Declare a new argument and return a handle to configure it.

        The argument starts positional, required, Fixed(1). Adding a dashed
        name through the handle turns it into a named (optional) argument.
        """
        if not isinstance(label, str):
            raise TypeError("argument label must be a string")
        if not isinstance(description, str):
            raise TypeError("argument description must be a string")
        if self._frozen:
            raise FrozenParserError(
                "cannot add argument %r, parser %r is already parsing" % (label, self._name),
                title="frozen parser",
                code=FaultCode.FROZEN_PARSER,
                hint="declare every argument before the first parse",
            )

        definition = ArgumentDefinition(label, description)
        if label == "help" and self._autohelp is not None:
            index, self._autohelp = self._autohelp, None
            self._definitions[index] = definition
            logger.debug("parser %r: built-in help replaced", self._name)
        else:
            index = len(self._definitions)
            self._definitions.append(definition)
        return ArgumentHandle(self, index)

    def _freeze(self):
        if not self._frozen:
            self._frozen = True
            logger.debug("parser %r frozen with %d definitions", self._name, len(self._definitions))

    def metalabels(self):
        """
        Resolve and return every definition's display name, in definition order.

        Resolution happens once; this freezes the parser.
        """
        self._freeze()
        return resolve_metalabels(self._definitions)

    def help_text(self):
        self._freeze()
        resolve_metalabels(self._definitions)
        return generate_help_text(self._name, self._description, self._definitions)

    def _commit(self, matches, registry):
        result = ParseResult()
        found = {id(match.definition): match for match in matches}

        for definition in registry.positionals:
            if (match := found.get(id(definition))) is not None:
                result.commit_positional(match.values, definition._label)
            else:
                result.commit_positional((), definition._label, supplied=False)

        for match in matches:
            if match.definition.is_named:
                definition = match.definition
                result.commit_named(match.values, definition._label or definition._metalabel)

        for definition in self._definitions:
            if definition.is_named and id(definition) not in found:
                result.commit_named((), definition._label or definition._metalabel, supplied=False)

        return result

    def parse_args_no_execute_filename(self, tokens, /):
        """
        Parse `tokens`, which must not include the program path.

        raises ConfigurationError subclasses when the parser was declared
        wrongly; user input mistakes are returned inside the ParseResult.
        """
        if isinstance(tokens, str):
            raise TypeError("tokens must be a sequence of strings, not a string")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("tokens must be strings")

        self._freeze()
        registry = NameRegistry.build(self._definitions)

        if registry.helper is not None and any(map(registry.is_help, tokens)):
            logger.debug("parser %r: help requested", self._name)
            return ParseResult(
                True,
                False,
                generate_help_text(self._name, self._description, self._definitions),
                renderable=render_help(
                    self._name,
                    self._description,
                    self._definitions,
                    colorful=self._colorful,
                    fancy=self._fancy,
                ),
            )

        try:
            matches = TokenMatcher(registry).match(tokens)
        except ParseError as error:
            logger.debug("parser %r: parse error %s", self._name, error.code)
            fault = copy.replace(error, prog=self._name, colorful=self._colorful, fancy=self._fancy)
            return ParseResult(True, True, str(error), fault=fault)

        result = self._commit(matches, registry)
        logger.debug("parser %r: parsed %d token(s) into %d match(es)", self._name, len(tokens), len(matches))
        return result

    def parse_args(self, tokens=Unset, /):
        """
        Parse `tokens` (sys.argv when Unset), dropping a leading program path.
        """
        if tokens is Unset:
            tokens = sys.argv
        if isinstance(tokens, str):
            raise TypeError("tokens must be a sequence of strings, not a string")
        return self.parse_args_no_execute_filename(strip_executable(tokens))

    def parse_argv(self, argc, argv, /):
        """
        Parse a C-style argument count and vector; argv[0] may be the program path.
        """
        if not isinstance(argc, int) or isinstance(argc, bool):
            raise TypeError("argc must be an integer")
        argv = list(argv)
        if not 0 <= argc <= len(argv):
            raise ValueError("argc must be between 0 and len(argv) (%d), got %d" % (len(argv), argc))
        return self.parse_args(argv[:argc])

    def parse_or_exit(self, tokens=Unset, /):
        """
        Parse and apply the conventional exit behaviour.

        - configuration error → fault rendered on stderr, SystemExit(2)
        - help requested      → help printed on stdout, SystemExit(0)
        - parse error         → fault rendered on stderr, SystemExit(1)
        - success             → the ParseResult
        """
        try:
            result = self.parse_args(tokens)
        except ConfigurationError as error:
            trigger(error, shell=True, prog=self._name, colorful=self._colorful, fancy=self._fancy)
        return result.finalize(colorful=self._colorful, fancy=self._fancy)

    def __rich_repr__(self):
        yield "name", self._name
        yield "description", self._description, ""
        yield "frozen", self._frozen
        yield "definitions", self._definitions

    def __repr__(self):
        return "ArgumentParser(%r, frozen=%r, definitions=%d)" % (self._name, self._frozen, len(self._definitions))


__all__ = (
    "ArgumentParser",
)
