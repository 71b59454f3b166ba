"""Utility functions for operator verifier"""

import enum
import types
import typing
from copy import deepcopy
from dataclasses import is_dataclass, fields

JSONValues = None | str | int | bool | list["JSONValues"] | dict[str, "JSONValues"]


def asdict(obj) -> dict[str, JSONValues]:
    """
    This function converts dataclass object to dictionary.
    While it works similar to `dataclasses.asdict` a notable change is usage of
    overriding `asdict()` function if dataclass contains it.
    This function works recursively in lists, tuples and dicts. All other values are passed to copy.deepcopy function.
    """
    if not is_dataclass(obj):
        raise TypeError("asdict() should be called on dataclass instances")
    return _asdict_recurse(obj)


def _asdict_recurse(obj):
    if hasattr(obj, "asdict"):
        return obj.asdict()

    if not is_dataclass(obj):
        return deepcopy(obj)

    result = {}
    for field in fields(obj):
        value = getattr(obj, field.name)
        if value is None:
            continue  # do not include None values

        if is_dataclass(value):
            result[field.name] = _asdict_recurse(value)
        elif isinstance(value, (list, tuple)):
            result[field.name] = [_asdict_recurse(i) for i in value]
        elif isinstance(value, dict):
            result[field.name] = {_asdict_recurse(k): _asdict_recurse(v) for k, v in value.items()}
        elif isinstance(value, enum.Enum):
            result[field.name] = value.value
        else:
            result[field.name] = deepcopy(value)
    return result


def fromdict(cls, data, strict=False):
    """
    Inverse of `asdict`, builds dataclass `cls` from the dictionary.
    Nested dataclasses (also wrapped in Optional or list) are built recursively
    and values of primitive fields (str, int, float, bool) must have matching type.
    Keys without a matching field are ignored, unless `strict` is True.
    Raises TypeError or ValueError if the dictionary does not match the dataclass.
    """
    if not is_dataclass(cls):
        raise TypeError("fromdict() should be called with dataclass type")
    if not isinstance(data, dict):
        raise TypeError(f"{cls.__name__} expects an object, got {type(data).__name__}")

    hints = typing.get_type_hints(cls)
    names = {field.name for field in fields(cls) if field.init}
    unknown = set(data) - names
    if strict and unknown:
        raise TypeError(f"{cls.__name__} got unexpected fields: {', '.join(sorted(unknown))}")

    kwargs = {}
    for name, value in data.items():
        if name not in names:
            continue
        try:
            kwargs[name] = _fromdict_value(hints[name], value, strict)
        except (TypeError, ValueError) as exc:
            raise type(exc)(f"{cls.__name__}.{name}: {exc}") from exc
    return cls(**kwargs)


def _fromdict_value(hint, value, strict):
    # pylint: disable=too-many-return-statements
    if value is None:
        return None
    origin = typing.get_origin(hint)
    args = typing.get_args(hint)
    if origin in (typing.Union, types.UnionType):
        candidates = [arg for arg in args if arg is not type(None)]
        if len(candidates) == 1:
            return _fromdict_value(candidates[0], value, strict)
        return value
    if origin is list:
        if not isinstance(value, list):
            raise TypeError(f"expected list, got {type(value).__name__}")
        return [_fromdict_value(args[0], item, strict) for item in value] if args else value
    if origin is dict:
        if not isinstance(value, dict):
            raise TypeError(f"expected object, got {type(value).__name__}")
        return value
    if is_dataclass(hint):
        return fromdict(hint, value, strict)
    if isinstance(hint, type) and issubclass(hint, enum.Enum):
        return hint(value)
    if hint in (str, int, float, bool):
        accepted = (int, float) if hint is float else hint
        if not isinstance(value, accepted) or (hint is not bool and isinstance(value, bool)):
            raise TypeError(f"expected {hint.__name__}, got {type(value).__name__}")
    return value
