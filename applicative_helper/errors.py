"""
Defines errors which can be returned by parsers.
"""
from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, TypeVar


@dataclass
class ArgumentError(Exception):
    usage: str


A = TypeVar("A")


@dataclass
class UnequalError(ArgumentError, Generic[A]):
    left: A
    right: A


@dataclass
class MissingError(ArgumentError):
    missing: str


@dataclass
class ZeroError(ArgumentError):
    pass


@dataclass
class UnexpectedError(ArgumentError):
    unexpected: str


@dataclass
class AmbiguousError(ArgumentError):
    token: str
    candidates: Tuple[str, ...]


@dataclass
class HelpError(ArgumentError):
    """
    Returned when the user asks for help. ``info`` is the
    :py:class:`ParserInfo <applicative_helper.info.ParserInfo>` whose help was requested
    and ``path`` the subcommands leading to it.
    """

    info: Optional[Any] = None
    path: Tuple[str, ...] = ()


@dataclass
class VersionError(ArgumentError):
    pass


@dataclass
class CommandError(ArgumentError):
    """
    Wraps an error that arose after a subcommand was matched, so that it
    can be reported in the context of that subcommand.
    """

    error: ArgumentError
    info: Any
    path: Tuple[str, ...]
