"""
Argweave help text: usage line and argument listing.

Two renderings share one layout
- generate_help_text(): plain text, stored in ParseResult.message.
- render_help(): rich renderable printed by ParseResult.finalize(); palette
  entries can be overridden through a __styles__ mapping in __main__.

Layout
    usage: <name> [-h|--help] <source> [dest]
    <description>

    arguments:
      [-h|--help]  Displays the help message
      <source>     file to copy

Metalabels are bracketed as [m] when optional and <m> when required, in
definition order. Definitions must have resolved metalabels (see
registry.resolve_metalabels).
"""
from collections import defaultdict

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

_PADDING = 2   # Leading spaces before the argument column
_INDENT = 15   # Column where descriptions start


def bracketed(definition, /):
    """
    Return "[metalabel]" for optional definitions, "<metalabel>" otherwise.
    """
    if definition._is_optional:
        return "[%s]" % definition._metalabel
    return "<%s>" % definition._metalabel


def usage_line(name, definitions, /):
    return "usage: %s " % name + " ".join(map(bracketed, definitions))


def _rows(definitions):
    # (bracketed metalabel, description, hanging) per definition
    for definition in definitions:
        item = bracketed(definition)
        yield item, definition._description, _PADDING + len(item) >= _INDENT - 1


def generate_help_text(name, description, definitions, /):
    """
    Build the plain help text for a program.

    The first line is always the usage line; the description and the
    arguments section follow when there is something to show.
    """
    lines = [usage_line(name, definitions)]
    if description:
        lines.append(description)

    if definitions:
        lines.append("")
        lines.append("arguments:")
        for item, descr, hanging in _rows(definitions):
            line = " " * _PADDING + item
            if descr:
                if hanging:
                    lines.append(line)
                    line = " " * _INDENT + descr
                else:
                    line = line.ljust(_INDENT) + descr
            lines.append(line)

    return "\n".join(lines)


def render_help(name, description, definitions, /, *, colorful=True, fancy=False):
    """
    Build the help screen as a rich renderable.

    Palette keys
    - usage-label, program-name, description-section
    - group-label, argument-description
    - optional-metalabel, required-metalabel
    - panel-title

    When colorful is False every style is dropped.
    """
    styles = defaultdict(str, {
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "description-section": "italic #A3A3A3",  # Neutral gray

        "group-label": "bold #FFFFFF",  # Pure white headers
        "argument-description": "#9CA3AF",  # Muted gray

        "optional-metalabel": "bold #00E6FF",  # CYAN for optional arguments
        "required-metalabel": "bold #FFD600",  # AMBER for required ones

        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def metalabel(definition):
        style = "optional-metalabel" if definition._is_optional else "required-metalabel"
        return Text(bracketed(definition), styler(style))

    renders = []

    usage = Text()
    usage.append("usage", styler("usage-label")).append(":")
    usage.append(" ")
    usage.append(name, styler("program-name"))
    usage.append(" ")
    usage.append(Text(" ").join(map(metalabel, definitions)))
    renders.append(usage)

    if description:
        renders.append(Text(description, styler("description-section")))

    if definitions:
        section = Text("\n")
        section.append("arguments", styler("group-label")).append(":")
        for definition, (item, descr, hanging) in zip(definitions, _rows(definitions)):
            section.append("\n").append(" " * _PADDING).append(metalabel(definition))
            if descr:
                if hanging:
                    section.append("\n").append(" " * _INDENT)
                else:
                    section.append(" " * (_INDENT - _PADDING - len(item)))
                section.append(descr, styler("argument-description"))
        renders.append(section)

    renderable = Group(*renders)
    if fancy:
        renderable = Panel(
            renderable,
            title=Text.assemble("[", " ", f"{name} HELP".upper(), " ", "]", style=styler("panel-title")),
            title_align="left",
        )
    return renderable


__all__ = (
    "bracketed",
    "usage_line",
    "generate_help_text",
    "render_help",
)
