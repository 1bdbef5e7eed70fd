"""
Helper functions that cut the boilerplate out of building command-line interfaces.

To use, do something like this:

>>> from enum import Enum
>>> from applicative_helper import Parser, command, fp_desc, helper_exec_parser, info_helper, subconcat
>>> class ParserResult(Enum):
...     RESULT1 = 1
...     RESULT2 = 2
...     RESULT3 = 3
...
>>> my_parser = subconcat(
...     [
...         command("result1", info_helper(Parser.return_(ParserResult.RESULT1), fp_desc("Result1"))),
...         command("result2", info_helper(Parser.return_(ParserResult.RESULT2), fp_desc("Result2"))),
...         command("result3", info_helper(Parser.return_(ParserResult.RESULT3), fp_desc("Result3"))),
...     ]
... )
>>> helper_exec_parser(my_parser, fp_desc("Demonstration"), args=["result2"])
<ParserResult.RESULT2: 2>
"""
from __future__ import annotations

import typing
from dataclasses import replace
from functools import lru_cache, reduce
from typing import Any, Optional, TypeVar

from applicative_helper.commands import CommandFields, subparser
from applicative_helper.execution import custom_exec_parser
from applicative_helper.info import ParserInfo, info
from applicative_helper.modifiers import (
    InfoMod,
    ParserPrefs,
    PrefsMod,
    disambiguate,
    full_desc,
    prefs,
    prog_desc,
    show_help_on_error,
)
from applicative_helper.parsers import Parser, helper

A = TypeVar("A")


def info_helper(parser: Parser[A], mod: InfoMod = InfoMod.zero()) -> ParserInfo[A]:
    """
    Wrapper around :py:func:`info <applicative_helper.info.info>` and
    :py:func:`helper <applicative_helper.parsers.helper>`. Instead of

    >>> from applicative_helper.parsers import argument
    >>> i = info(helper().ap(argument("name")), fp_desc("Greets someone."))

    it's just

    >>> i = info_helper(argument("name"), fp_desc("Greets someone."))
    >>> print(i.help_text("greet"))
    usage: greet NAME
    <BLANKLINE>
    Greets someone.
    <BLANKLINE>
    -h, --help: Show this help text
    """
    return info(helper().ap(parser), mod)


def altconcat(parsers: typing.Sequence[Parser[A]]) -> Parser[A]:
    """
    Sort of like ``sum`` for :py:meth:`| <applicative_helper.parsers.Parser.__or__>`. Instead of

    >>> from applicative_helper.parsers import flag, matches
    >>> p = flag("verbose") | flag("quiet") | matches("run")

    it's just

    >>> p = altconcat([flag("verbose"), flag("quiet"), matches("run")])
    >>> p.parse_args("--quiet")
    True
    >>> p.usage
    '[--verbose | --quiet | run]'

    The parsers are tried in order and the first one that succeeds wins.
    An empty list gives :py:meth:`Parser.zero <applicative_helper.parsers.Parser.zero>`,
    which always fails:

    >>> altconcat([]).parse_args()
    zero
    """
    parser: Parser[A] = reduce(lambda acc, p: p | acc, reversed(parsers), Parser.zero())
    usages = [p.usage for p in parsers if p.usage]
    usage: Optional[str] = " | ".join(usages) or None
    if len(usages) > 1:
        usage = f"[{usage}]"
    return replace(parser, usage=usage)


def subconcat(mods: typing.Sequence[CommandFields]) -> Parser[Any]:
    """
    :py:func:`altconcat` over :py:func:`subparser <applicative_helper.commands.subparser>`. Instead of

    >>> from applicative_helper.commands import command
    >>> from applicative_helper.parsers import Parser
    >>> foo = command("foo", info_helper(Parser.return_("foo")))
    >>> bar = command("bar", info_helper(Parser.return_("bar")))
    >>> p = subparser(foo) | subparser(bar)

    it's just

    >>> p = subconcat([foo, bar])
    >>> p.parse_args("bar")
    'bar'
    """
    return altconcat([subparser(mod) for mod in mods])


def fp_desc(text: str) -> InfoMod:
    """
    ``full_desc() | prog_desc(text)``. Instead of

    >>> mod = full_desc() | prog_desc("whatever")

    it's just

    >>> mod = fp_desc("whatever")
    >>> info(Parser.return_(None), mod).prog_desc
    'whatever'
    """
    return full_desc() | prog_desc(text)


@lru_cache()
def helper_prefs() -> ParserPrefs:
    """
    Preferences that

    * disambiguate shortened subcommands
    * show help whenever someone makes an error.

    Use this together with :py:func:`info_helper` for maximum helpfulness.

    >>> helper_prefs()
    ParserPrefs(disambiguate=True, show_help_on_error=True, show_help_on_empty=False)
    """
    return prefs(helper_prefs_mod())


def helper_prefs_mod() -> PrefsMod:
    """
    The :py:class:`PrefsMod <applicative_helper.modifiers.PrefsMod>` behind :py:func:`helper_prefs`,
    so that you can add on your own preferences:

    >>> from applicative_helper.modifiers import show_help_on_empty
    >>> prefs(helper_prefs_mod() | show_help_on_empty()).show_help_on_empty
    True
    """
    return disambiguate() | show_help_on_error()


def helper_exec_parser(
    parser: Parser[A],
    mod: InfoMod = InfoMod.zero(),
    args: Optional[typing.Sequence[str]] = None,
) -> A:
    """
    ``custom_exec_parser(helper_prefs(), info_helper(parser, mod), args)``.
    If ``args`` is ``None``, parses ``sys.argv[1:]``.
    """
    return custom_exec_parser(helper_prefs(), info_helper(parser, mod), args)

