"""
Defines :py:func:`command` and :py:func:`subparser`, which turn
:py:class:`ParserInfo <applicative_helper.info.ParserInfo>` objects into subcommands.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Tuple, Type, Union

from pytypeclass import Monoid
from pytypeclass.nonempty_list import NonemptyList

from applicative_helper.data_structures import Sequence
from applicative_helper.errors import (
    AmbiguousError,
    ArgumentError,
    CommandError,
    HelpError,
    MissingError,
    UnexpectedError,
    VersionError,
)
from applicative_helper.info import ParserInfo
from applicative_helper.parsers import Context, Parse, Parser
from applicative_helper.result import Result


@dataclass(frozen=True)
class CommandFields(Monoid[Tuple[str, ParserInfo]]):
    """
    An ordered collection of named commands. Combine with ``|``.

    >>> from applicative_helper.info import info
    >>> from applicative_helper.parsers import Parser
    >>> fields = command("start", info(Parser.return_(1))) | command("stop", info(Parser.return_(2)))
    >>> fields.names()
    ('start', 'stop')
    """

    commands: Tuple[Tuple[str, ParserInfo], ...] = ()

    def __or__(self, other: CommandFields) -> CommandFields:  # type: ignore[override]
        return CommandFields((*self.commands, *other.commands))

    def __add__(self, other: CommandFields) -> CommandFields:
        return self | other

    def names(self) -> Tuple[str, ...]:
        return tuple(name for name, _ in self.commands)

    @classmethod
    def zero(cls: Type[CommandFields]) -> CommandFields:  # type: ignore[override]
        return CommandFields()


def command(name: str, info: ParserInfo[Any]) -> CommandFields:
    """
    Binds ``name`` to ``info``. Pass the result to :py:func:`subparser`.
    """
    return CommandFields(((name, info),))


def _lookup(token: str, fields: CommandFields, context: Context) -> Union[str, ArgumentError]:
    names = fields.names()
    if token in names:
        return token
    invalid = UnexpectedError(unexpected=token, usage=f"Invalid argument '{token}'")
    if not context.prefs.disambiguate:
        return invalid
    candidates = tuple(
        dict.fromkeys(n for n in (*names, *context.commands) if n.startswith(token))
    )
    if not any(n in names for n in candidates):
        return invalid
    if len(candidates) > 1:
        return AmbiguousError(
            token=token,
            candidates=candidates,
            usage=f"Ambiguous command '{token}'. Could be: {', '.join(candidates)}",
        )
    [name] = candidates
    return name


def subparser(mod: CommandFields, metavar: str = "COMMAND") -> Parser[Any]:
    """
    Parses one of the commands in ``mod``. The first word selects the command and
    the remaining words are handed to that command's
    :py:class:`ParserInfo <applicative_helper.info.ParserInfo>`, which must consume all of them.

    >>> from applicative_helper.info import info
    >>> from applicative_helper.parsers import argument
    >>> p = subparser(command("greet", info(argument("name"))))
    >>> p.parse_args("greet", "Alice")
    'Alice'
    >>> p.parse_args("wave")
    usage: greet
    Invalid argument 'wave'
    """
    infos = dict(mod.commands)

    def f(cs: Sequence[str], context: Context) -> Result[Parse[Any]]:
        if not cs:
            return Result(MissingError(missing=metavar, usage=f"Missing: {metavar}"))
        head, *tail = cs
        name = _lookup(head, mod, context)
        if isinstance(name, ArgumentError):
            return Result(name)
        info = infos[name]
        result = info.run(Sequence(tail), Context(prefs=context.prefs))
        get = result.get
        if isinstance(get, NonemptyList):
            return Result.return_(Parse(parsed=get.head.parsed, unparsed=Sequence([])))
        if isinstance(get, (HelpError, CommandError)):
            return Result(replace(get, path=(name, *get.path)))
        if isinstance(get, VersionError):
            return Result(get)
        return Result(CommandError(usage=get.usage, error=get, info=info, path=(name,)))

    names = mod.names()
    helps = {name: info.prog_desc for name, info in mod.commands if info.prog_desc}
    usage = names[0] if len(names) == 1 else metavar
    return Parser(f, usage=usage, helps=helps, commands=names)
