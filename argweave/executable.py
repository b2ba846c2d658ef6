"""
Argweave executable path service.

- current_executable_path(): path of the running program, used to recognise
  argv[0] in a raw token list.
- strip_executable(tokens): drop the first token when it names the running
  program; keep it on any resolution failure.
"""
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def current_executable_path():
    """
    Return the resolved path of the running program.

    lookup order
    - sys.executable for frozen applications (PyInstaller and friends)
    - the __main__ module file
    - sys.argv[0]
    - sys.executable

    raises OSError when none of them is available.
    """
    candidates = []
    if getattr(sys, "frozen", False):
        candidates.append(sys.executable)
    candidates.append(getattr(__import__("__main__"), "__file__", None))
    candidates.append(sys.argv[0] if sys.argv else None)
    candidates.append(sys.executable)

    for candidate in candidates:
        if candidate:
            return Path(candidate).absolute().resolve(strict=False)
    raise OSError("cannot determine the path of the running program")


def strip_executable(tokens, /):
    """
    Return `tokens` without its first element when that element resolves to
    current_executable_path(), otherwise return them unchanged (as a list).
    """
    tokens = list(tokens)
    if not tokens:
        return tokens
    try:
        first = Path(tokens[0]).absolute().resolve(strict=False)
        executable = current_executable_path()
    except (OSError, ValueError, RuntimeError) as error:
        logger.debug("keeping first token %r, path resolution failed: %s", tokens[0], error)
        return tokens
    if first == executable:
        logger.debug("stripped executable path %r", tokens[0])
        return tokens[1:]
    return tokens


__all__ = (
    "current_executable_path",
    "strip_executable",
)
