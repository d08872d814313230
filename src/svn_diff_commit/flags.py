"""Bidirectional mapping between flat argument vectors and dataclasses.

A schema is an ordinary ``@dataclass`` whose fields carry their external
flag name in ``field(metadata=...)`` under a configurable tag key.  Fields
marked ``{"embed": True}`` hold a nested dataclass whose own fields are
flattened into the parent's flag namespace.

Usage:
    from svn_diff_commit.flags import embedded, make_args, option, parse_args

    @dataclass
    class Auth:
        username: str = option("--username")
        no_auth_cache: bool = option("--no-auth-cache", False)

    make_args(Auth(username="gbaltar"))   # ["--username", "gbaltar"]
    parse_args(["--no-auth-cache"], Auth())

Only ``bool`` and ``str`` leaf fields are supported.  ``True`` booleans
serialise as a bare flag; non-empty strings as ``flag value``.  Defaults
(``False`` / ``""``) are omitted, so ``parse_args(make_args(x), type(x)())``
reproduces every non-default field of ``x``.
"""

from __future__ import annotations

import dataclasses
import functools
import logging
import typing
from collections.abc import Callable, Sequence
from typing import Any, TypeVar

from .errors import (
    DuplicateKeyError,
    FlagSyntaxError,
    KeyExpectedError,
    MissingValueError,
    MultipleValuesForKeyError,
    UnannotatedFieldError,
    UnknownOptionError,
    UnsupportedFieldTypeError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

FLAG_PREFIX = "--"
DEFAULT_TAG = "flag"
EMBED_KEY = "embed"


# ---------------------------------------------------------------------------
# Schema declaration helpers
# ---------------------------------------------------------------------------


def option(flag: str, default: Any = "", *, tag: str = DEFAULT_TAG) -> Any:
    """Declare a dataclass field mapped to *flag*."""
    return dataclasses.field(default=default, metadata={tag: flag})


def embedded(factory: Callable[[], Any]) -> Any:
    """Declare a nested dataclass field flattened into the parent namespace."""
    return dataclasses.field(
        default_factory=factory, metadata={EMBED_KEY: True}
    )


# ---------------------------------------------------------------------------
# Grouping
# ---------------------------------------------------------------------------


def group_args(args: Sequence[str]) -> dict[str, str | None]:
    """Group a raw argument vector into ``{key: value-or-None}``.

    Keys are tokens starting with ``--``.  A key that is never followed by
    a value maps to ``None`` (this is how boolean flags are recognised).

    Raises:
        DuplicateKeyError: The same key appears twice.
        KeyExpectedError: A value appears before any key.
        MultipleValuesForKeyError: A key is followed by two values.
    """
    grouped: dict[str, str | None] = {}
    key = ""
    for arg in args:
        token = arg.strip()
        if token.startswith(FLAG_PREFIX):
            if token in grouped:
                raise DuplicateKeyError(token)
            key = token
            grouped[key] = None
            continue
        if not key:
            raise KeyExpectedError(token)
        if grouped[key] is not None:
            raise MultipleValuesForKeyError(key)
        grouped[key] = token
    return grouped


# ---------------------------------------------------------------------------
# Schema resolution
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class FieldSpec:
    """One leaf field of a flattened schema.

    Attributes:
        flag: External flag name, e.g. ``--username``.
        path: Attribute names from the root object down to the field.
        kind: Resolved field type (``bool``, ``str`` or unsupported).
    """

    flag: str
    path: tuple[str, ...]
    kind: Any

    @property
    def name(self) -> str:
        return ".".join(self.path)


@functools.lru_cache(maxsize=None)
def _schema(cls: type, tag: str) -> tuple[FieldSpec, ...]:
    """Flatten *cls* into leaf ``FieldSpec`` entries in declaration order.

    Raises:
        DuplicateKeyError: Two leaf fields declare the same flag.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass schema")

    hints = typing.get_type_hints(cls)
    specs: list[FieldSpec] = []
    for f in dataclasses.fields(cls):
        kind = hints.get(f.name, f.type)
        if f.metadata.get(EMBED_KEY) and dataclasses.is_dataclass(kind):
            for child in _schema(kind, tag):
                specs.append(
                    dataclasses.replace(child, path=(f.name, *child.path))
                )
            continue
        flag = f.metadata.get(tag)
        if not flag:
            raise UnannotatedFieldError(cls.__name__, f.name)
        specs.append(FieldSpec(flag=flag, path=(f.name,), kind=kind))

    seen: set[str] = set()
    for spec in specs:
        if spec.flag in seen:
            raise DuplicateKeyError(spec.flag)
        seen.add(spec.flag)
    return tuple(specs)


def _owner(root: object, spec: FieldSpec) -> object:
    obj = root
    for attr in spec.path[:-1]:
        obj = getattr(obj, attr)
    return obj


# ---------------------------------------------------------------------------
# Marshaller
# ---------------------------------------------------------------------------


class ArgMarshaller:
    """Convert dataclass schemas to and from argument vectors.

    Args:
        tag: Field metadata key holding the flag name.  The same key is
            used in both directions.
    """

    def __init__(self, tag: str = DEFAULT_TAG) -> None:
        self.tag = tag

    def fields(self, cls: type) -> tuple[FieldSpec, ...]:
        """Return the cached flattened schema for *cls*."""
        return _schema(cls, self.tag)

    def field_map(self, cls: type) -> dict[str, FieldSpec]:
        return {spec.flag: spec for spec in self.fields(cls)}

    def to_args(self, config: object) -> list[str]:
        """Serialise *config* into an argument vector.

        Raises:
            UnannotatedFieldError: A leaf field has no flag name.
            UnsupportedFieldTypeError: A leaf field is neither bool nor str.
        """
        out: list[str] = []
        for spec in self.fields(type(config)):
            value = getattr(_owner(config, spec), spec.path[-1])
            if spec.kind is bool:
                if value:
                    out.append(spec.flag)
            elif spec.kind is str:
                if value:
                    out.extend([spec.flag, value])
            else:
                raise UnsupportedFieldTypeError(spec.name, spec.kind)
        return out

    def from_args(self, args: Sequence[str], target: T) -> T:
        """Populate *target* in place from an argument vector.

        Args:
            args: Argument vector without the program name.
            target: Dataclass instance to populate.

        Returns:
            *target*, for convenience.

        Raises:
            UnknownOptionError: A key matches no field.
            FlagSyntaxError: A boolean flag was given a value.
            MissingValueError: A string flag was given no value.
            MarshalError: Any grouping error from ``group_args()``.
        """
        grouped = group_args(args)
        fm = self.field_map(type(target))
        for key, value in grouped.items():
            spec = fm.get(key)
            if spec is None:
                raise UnknownOptionError(key)
            owner = _owner(target, spec)
            if spec.kind is bool:
                if value is not None:
                    raise FlagSyntaxError(key, value)
                setattr(owner, spec.path[-1], True)
            elif spec.kind is str:
                if value is None:
                    raise MissingValueError(key)
                setattr(owner, spec.path[-1], value)
            else:
                raise UnsupportedFieldTypeError(spec.name, spec.kind)
        logger.debug("Parsed flags: %s", sorted(grouped))
        return target


_default = ArgMarshaller()


def make_args(config: object) -> list[str]:
    """Serialise *config* with the default ``flag`` tag."""
    return _default.to_args(config)


def parse_args(args: Sequence[str], target: T) -> T:
    """Populate *target* from *args* with the default ``flag`` tag."""
    return _default.from_args(args, target)
