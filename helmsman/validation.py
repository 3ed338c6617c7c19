"""
Alias expansion and option validation.

- expand(options, raw): re-key short aliases under their canonical names.
- validate(values, allowed): required → type → unknown checks, first failure wins.

Both operate on plain dicts of already tokenized values; neither mutates its input.
"""
from .faults import InvalidValueError, MissingOptionError, UnknownOptionError


def expand(options, raw, /):
    """
    Return a copy of raw with every alias key replaced by its canonical option name.

    Keys that are not aliases pass through unchanged. Only top-level keys are
    rewritten, once, so expanding an already canonical mapping is a no-op.
    """
    aliases = {option.alias: option.name for option in options if option.alias}
    return {aliases.get(key, key): value for key, value in raw.items()}


def validate(values, allowed, /):
    """
    Check expanded option values against the allowed options (command + global).

    Raises
    - MissingOptionError: a required option has no truthy value.
    - InvalidValueError: a present value matches none of the option's types.
    - UnknownOptionError: a key is not the canonical name of any allowed option.
    """
    for option in allowed:
        if option.required and not values.get(option.name):
            raise MissingOptionError(f'Missing option "{option.name}"')

    for option in allowed:
        if (value := values.get(option.name)) and not option.accepts(value):
            raise InvalidValueError(f'Invalid value for option "{option.name}"')

    names = {option.name for option in allowed}
    for key in values:
        if key not in names:
            raise UnknownOptionError(f'Invalid option: "{key}"')


__all__ = (
    "expand",
    "validate",
)
