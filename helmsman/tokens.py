r"""
Helmsman tokenizer adapter.

Turns a raw argument vector into positional values and a flat option map. The
command engine never looks at raw tokens; it only consumes Tokens.

Rules (every switch is boolean unless it carries an inline value)
- "--name=value"  → {"name": "value"}
- "--name"        → {"name": True}
- "--no-name"     → {"name": False}
- "-abc"          → {"a": True, "b": True, "c": True}
- "-a=value"      → {"a": "value"}
- "-ab=value"     → {"a": True, "b": "value"}
- "--"            → every following token is positional
- "-" alone and anything else → positional

Values stay strings: there is no numeric coercion, and the last occurrence of a
repeated key wins.
"""
import re
import shlex
import sys
from collections.abc import Iterable
from typing import NamedTuple

from .utils import Unset


class Tokens(NamedTuple):
    positional: tuple[str, ...]
    options: dict[str, str | bool]


def _split(prompt):
    if prompt is Unset:
        return sys.argv[1:]
    if isinstance(prompt, str):
        return shlex.split(prompt)
    if isinstance(prompt, Iterable):
        tokens = []
        for item in prompt:
            if not isinstance(item, str):
                raise TypeError("tokenize() argument must be a string or an iterable of strings")
            tokens.append(item)
        return tokens
    raise TypeError("tokenize() argument must be a string or an iterable of strings")


def tokenize(prompt=Unset, /):
    """
    Split a prompt into Tokens.

    Parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string, split with shlex.split.
      • Iterable[str]: pre-tokenized sequence.

    Raises
    - TypeError: when prompt is not Unset/str/Iterable[str].
    """
    positional = []
    options = {}
    tokens = iter(_split(prompt))

    for token in tokens:
        if token == "--":
            positional.extend(tokens)
            break

        if match := re.fullmatch(r"--([^=]+)=(.*)", token, re.DOTALL):
            options[match[1]] = match[2]
        elif match := re.fullmatch(r"--no-(.+)", token):
            options[match[1]] = False
        elif match := re.fullmatch(r"--(.+)", token):
            options[match[1]] = True
        elif match := re.fullmatch(r"-(\w+)=(.*)", token, re.DOTALL):
            options.update(dict.fromkeys(match[1][:-1], True))
            options[match[1][-1]] = match[2]
        elif re.fullmatch(r"-[^-\s]+", token):
            options.update(dict.fromkeys(token[1:], True))
        else:
            positional.append(token)

    return Tokens(tuple(positional), options)


__all__ = (
    "Tokens",
    "tokenize",
)
