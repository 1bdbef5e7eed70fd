"""
Runs a :py:class:`ParserInfo <applicative_helper.info.ParserInfo>` against the command line.

:py:func:`exec_parser_pure` does the parsing without side effects and returns a
:py:class:`Success` or a :py:class:`Failure`. :py:func:`handle_parse_result` turns
that into a value or an exit, printing whatever needs to be printed.
"""
from __future__ import annotations

import os
import sys
import typing
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from applicative_helper.data_structures import Sequence
from applicative_helper.errors import ArgumentError, CommandError, HelpError, VersionError
from applicative_helper.info import ParserInfo
from applicative_helper.modifiers import ParserPrefs
from applicative_helper.parsers import Context, Parser

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")


@dataclass(frozen=True)
class Success(Generic[A_co]):
    value: A_co


@dataclass(frozen=True)
class Failure:
    """
    Parameters
    ----------

    message : str
        The text to show the user.

    exit_code : int
        The code to exit with.

    stream : str
        ``"stdout"`` for help and version requests, ``"stderr"`` for errors.
    """

    message: str
    exit_code: int
    stream: str


def _failure(
    prefs: ParserPrefs,
    info: ParserInfo,
    error: ArgumentError,
    args: typing.Sequence[str],
    prog: str,
) -> Failure:
    if isinstance(error, HelpError):
        context = info if error.info is None else error.info
        return Failure(
            context.help_text(" ".join([prog, *error.path]).strip()),
            exit_code=0,
            stream="stdout",
        )
    if isinstance(error, VersionError):
        return Failure(error.usage, exit_code=0, stream="stdout")
    context, path = info, ()
    if isinstance(error, CommandError):
        context, path = error.info, error.path
    _prog = " ".join([prog, *path]).strip()
    if prefs.show_help_on_empty and not args:
        return Failure(context.help_text(_prog), context.failure_code, stream="stderr")
    if prefs.show_help_on_error:
        text: Optional[str] = context.help_text(_prog)
    else:
        text = context.usage_text(_prog)
    message = "\n".join([x for x in (text, error.usage) if x])
    return Failure(message, exit_code=context.failure_code, stream="stderr")


def exec_parser_pure(
    prefs: ParserPrefs,
    info: ParserInfo[A],
    args: typing.Sequence[str],
    prog: str = "",
) -> "Success[A] | Failure":
    """
    Parses ``args`` with ``info`` under ``prefs``.

    >>> from applicative_helper.info import info
    >>> from applicative_helper.parsers import argument
    >>> exec_parser_pure(ParserPrefs(), info(argument("name")), ["Alice"])
    Success(value='Alice')
    >>> exec_parser_pure(ParserPrefs(), info(argument("name")), ["Alice", "Bob"], prog="greet")
    Failure(message='usage: greet NAME\\nUnrecognized argument: Bob', exit_code=1, stream='stderr')
    """
    result = info.run(Sequence(list(args)), Context(prefs=prefs)).get
    if isinstance(result, ArgumentError):
        return _failure(prefs, info, result, args, prog)
    return Success(result.head.parsed)


def handle_parse_result(result: "Success[A] | Failure") -> A:
    """
    Returns the parsed value or prints the failure message and exits.
    """
    if isinstance(result, Success):
        return result.value
    Parser._print(result.message, file=sys.stdout if result.stream == "stdout" else sys.stderr)
    sys.exit(result.exit_code)


def custom_exec_parser(
    prefs: ParserPrefs,
    info: ParserInfo[A],
    args: Optional[typing.Sequence[str]] = None,
) -> A:
    """
    Parses ``args`` (``sys.argv[1:]`` if ``None``) and returns the output.
    Prints help, version, or error messages and exits when parsing does not succeed.
    """
    _args = sys.argv[1:] if args is None else args
    prog = os.path.basename(sys.argv[0]) if sys.argv else ""
    return handle_parse_result(exec_parser_pure(prefs, info, _args, prog=prog))


def exec_parser(info: ParserInfo[A], args: Optional[typing.Sequence[str]] = None) -> A:
    """
    :py:func:`custom_exec_parser` with default preferences.
    """
    return custom_exec_parser(ParserPrefs(), info, args)
