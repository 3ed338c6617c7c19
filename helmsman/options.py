r"""
Helmsman option specifications.

Overview
- Option: a named, possibly aliased, possibly typed command-line setting.
  • name: canonical identifier (the long form, without dashes), e.g. "format".
  • alias: optional single-character shorthand, e.g. "f".
  • type: "string", "path", "boolean", or an ordered collection of these; a value
    is accepted when it matches any of them.
  • required: dispatch fails unless the option carries a truthy value.
  • descr: text shown in help tables.

Validation highlights
- Names must match r"[^\W\d_][\w-]*" (no leading dashes; they are added by help).
- Aliases are exactly one word character.
- Type names are checked on construction; an empty type collection is rejected.

Quick example:
    >>> from helmsman.options import Option
    >>> fmt = Option("format", alias="f", required=True, descr="output format")
    >>> fmt.accepts("png"), fmt.accepts(True)
    (True, False)
"""
import re
from collections.abc import Iterable

from .utils import *

TYPES = ("string", "path", "boolean")


class Option:
    """
    Declares one configurable option.

    Instances are read-only once built; every field is exposed through a mirrored
    property. Equality is identity, so the same Option may be shared by several
    commands without ambiguity.
    """

    __introspectable__ = (
        "name",
        "alias",
        "type",
        "required",
        "descr",
    )

    name = mirror("name")
    alias = mirror("alias")
    type = mirror("type")
    required = mirror("required")
    descr = mirror("descr")

    def __init__(self, name, /, alias=Unset, type="string", required=False, descr=Unset):
        if not isinstance(name, str):
            raise TypeError("option 'name' must be a string")
        elif not re.fullmatch(r"[^\W\d_][\w-]*", name := name.strip()):
            raise ValueError(f"option 'name' is not a valid identifier: {name!r}")

        if alias is not Unset:
            if not isinstance(alias, str):
                raise TypeError("option 'alias' must be a string")
            elif not re.fullmatch(r"\w", alias):
                raise ValueError(f"option 'alias' must be a single character: {alias!r}")

        if isinstance(type, str):
            types = (type,)
        elif isinstance(type, Iterable):
            types = tuple(type)
            if not types:
                raise ValueError("option 'type' collection must not be empty")
        else:
            raise TypeError("option 'type' must be a string or a collection of strings")

        for kind in types:
            if kind not in TYPES:
                raise ValueError(f"option 'type' must be one of {', '.join(TYPES)}, got {kind!r}")

        if not isinstance(descr, str | Unset):
            raise TypeError("option 'descr' must be a string")

        self._name = name
        self._alias = coalesce(alias)
        self._type = type if isinstance(type, str) else types
        self._types = types
        self._required = bool(required)
        self._descr = coalesce(descr, "")

    @property
    def types(self):
        """Declared types as an ordered tuple, even when a single type was given."""
        return self._types

    @property
    def example(self):
        """
        Placeholder used by the command usage line for required options.

        The first declared type wins for type collections: "<value>" for strings,
        "<path>" for paths and None for booleans (rendered as a bare --name).
        """
        match self._types[0]:
            case "string":
                return "<value>"
            case "path":
                return "<path>"
            case "boolean":
                return None
            case other:
                raise ValueError(f"invalid option type: {other}")

    @property
    def label(self):
        """Name column of the help tables, e.g. "--format, -f"."""
        return "--" + self._name + (", -" + self._alias if self._alias else "")

    def accepts(self, value, /):
        """
        Return True when the value satisfies at least one declared type.

        - string/path: any textual value.
        - boolean: a bool, or a falsy value (absence is implicitly satisfied).
        """
        for kind in self._types:
            match kind:
                case "string" | "path":
                    if isinstance(value, str):
                        return True
                case "boolean":
                    if not value or isinstance(value, bool):
                        return True
        return False

    def __repr__(self):
        fields = ", ".join(
            f"{field}={getattr(self, field)!r}" for field in self.__introspectable__[1:]
            if getattr(self, field)
        )
        return f"Option({self.name!r}{', ' + fields if fields else ''})"

    def __rich_repr__(self):
        yield self.name
        for field in self.__introspectable__[1:]:
            if value := getattr(self, field):
                yield field, value


__all__ = (
    "Option",
    "TYPES",
)
