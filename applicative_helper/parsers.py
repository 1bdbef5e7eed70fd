"""
Defines parsing functions and the
:py:class:`Parser <applicative_helper.parsers.Parser>`
class that they instantiate.
"""
# pyright: reportGeneralTypeIssues=false
from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

from pytypeclass import Monad, MonadPlus
from pytypeclass.nonempty_list import NonemptyList

from applicative_helper.data_structures import Sequence
from applicative_helper.errors import (
    ArgumentError,
    HelpError,
    MissingError,
    UnequalError,
    UnexpectedError,
    VersionError,
)
from applicative_helper.modifiers import ParserPrefs
from applicative_helper.result import Result

PRINTING = os.environ.get("APPLICATIVE_HELPER_PRINTING", "1") != "0"

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")
B = TypeVar("B")


@dataclass
class Parse(Generic[A_co]):
    """
    A ``Parse`` is the output of parsing.

    Parameters
    ----------

    parsed : A
        Component parsed by the parser

    unparsed : Sequence[str]
        Component yet to be parsed

    """

    parsed: A_co
    unparsed: Sequence[str]


@dataclass(frozen=True)
class Context:
    """
    State threaded through a parse that is not part of the input.

    Parameters
    ----------

    prefs : ParserPrefs
        The preferences the parse runs under.

    commands : Tuple[str, ...]
        Names of every command that could match the next word. Used to
        detect ambiguous prefixes when ``prefs.disambiguate`` is set.
    """

    prefs: ParserPrefs = field(default_factory=ParserPrefs)
    commands: Tuple[str, ...] = ()

    def extend(self, commands: Tuple[str, ...]) -> "Context":
        return replace(self, commands=tuple(dict.fromkeys((*self.commands, *commands))))

    def advance(self) -> "Context":
        return replace(self, commands=())


def binary_usage(a: Optional[str], op: str, b: Optional[str], add_brackets=True):
    """
    Utility for generating usage strings for binary operators.
    """
    no_nones = [x for x in (a, b) if x is not None]
    usage = op.join(no_nones)
    if len(no_nones) > 1 and add_brackets:
        usage = f"[{usage}]"
    return usage or None


def _identity(a: A) -> A:
    return a


@dataclass
class Parser(MonadPlus[A_co]):
    """
    Main class powering the argument parser.
    """

    f: Callable[[Sequence[str], Context], Result[Parse[A_co]]]
    usage: Optional[str]
    helps: Dict[str, str]
    commands: Tuple[str, ...] = ()

    def __ge__(self, f: Callable[[A_co], Monad[B]]) -> "Parser[B]":  # type: ignore[override]
        """Sugar for :py:meth:`Parser.bind <applicative_helper.parsers.Parser.bind>`."""
        return self.bind(f)

    def __or__(  # type: ignore[override]
        self: "Parser[A]",
        other: "Parser[B]",
    ) -> "Parser[A | B]":
        """
        Tries the first parser. If it fails, tries the second. If that fails, the parser fails.
        The second parser only runs if the first one fails.

        >>> p = matches("start").map(lambda _: 1) | matches("stop").map(lambda _: 2)
        >>> p.parse_args("start")
        1
        >>> p.parse_args("stop")
        2
        >>> p.usage
        '[start | stop]'
        """

        def f(cs: Sequence[str], context: Context) -> Result[Parse["A | B"]]:
            inner = context.extend((*self.commands, *other.commands))
            result = self.parse(cs, inner)
            if isinstance(result.get, NonemptyList):
                return result
            return result | other.parse(cs, inner)

        return Parser(
            f,
            usage=binary_usage(self.usage, " | ", other.usage),
            helps={**self.helps, **other.helps},
            commands=tuple(dict.fromkeys((*self.commands, *other.commands))),
        )

    def ap(self: "Parser[Callable[[A], B]]", other: "Parser[A]") -> "Parser[B]":
        """
        Applies the function output by ``self`` to the output of ``other``,
        running ``self`` first. This is ``<*>`` for applicative parsers.

        >>> p = Parser.return_(str.upper).ap(item("name"))
        >>> p.parse_args("alice")
        'ALICE'
        """
        p = self >= (lambda g: other.map(g))

        def f(cs: Sequence[str], context: Context) -> Result[Parse[B]]:
            return p.parse(cs, context.extend(other.commands))

        return Parser(
            f,
            usage=other.usage,
            helps={**self.helps, **other.helps},
            commands=tuple(dict.fromkeys((*self.commands, *other.commands))),
        )

    def apply(self: "Parser[A]", f: Callable[[A], Result[B]]) -> "Parser[B]":
        """
        Takes the output of the parser and applies ``f`` to it.
        Converts any exception raised by ``f`` into an
        :py:class:`ArgumentError <applicative_helper.errors.ArgumentError>`.

        >>> p = item("n").apply(lambda s: Result.return_(len(s)))
        >>> p.parse_args("four")
        4
        """

        def g(a: A) -> Parser[B]:
            try:
                y = f(a)
            except Exception as e:
                usage = f"An argument {a}: raised exception {e}"
                y = Result(ArgumentError(usage))
            return Parser(
                lambda cs, _: y >= (lambda parsed: Result.return_(Parse(parsed, cs))),
                usage=self.usage,
                helps=self.helps,
            )

        p = self >= g
        return replace(p, usage=self.usage, helps=self.helps, commands=self.commands)

    def bind(self, f: Callable[[A_co], Monad[B]]) -> "Parser[B]":  # type: ignore[override]
        """
        Returns a new parser that

        1. applies ``self``;
        2. if this succeeds, applies ``f`` to the parsed component of the result
           and runs the parser that ``f`` returns on the remaining input.

        >>> p = item("first") >= (lambda first: matches(first))
        >>> p.parse_args("a", "a")
        'a'
        >>> p.parse_args("a", "b")
        Expected 'a'. Got 'b'
        """

        def h(parse: Parse[A_co], context: Context) -> Result[Parse[B]]:
            y = f(parse.parsed)
            assert isinstance(y, Parser), y
            return y.parse(parse.unparsed, context)

        def g(cs: Sequence[str], context: Context) -> Result[Parse[B]]:
            return self.parse(cs, context) >= (lambda parse: h(parse, context.advance()))

        return Parser(g, usage=None, helps=self.helps, commands=self.commands)

    def map(self, f: Callable[[A_co], B]) -> "Parser[B]":
        """
        Applies ``f`` to the output of the parser.

        >>> item("n").map(int).parse_args("3")
        3
        """
        p = self >= (lambda a: Parser.return_(f(a)))
        return replace(p, usage=self.usage, helps=self.helps, commands=self.commands)

    def map_error(self, f: Callable[[ArgumentError], ArgumentError]) -> "Parser[A_co]":
        def g(cs: Sequence[str], context: Context) -> Result[Parse[A_co]]:
            parse = self.parse(cs, context)
            if isinstance(parse.get, ArgumentError):
                return Result.zero(error=f(parse.get))
            else:
                return parse

        return replace(self, f=g)

    def optional(self: "Parser[A]", default: B = None) -> "Parser[A | B]":  # type: ignore[assignment]
        """
        Allows arguments to be optional:

        >>> p = option("name").optional(default="nobody")
        >>> p.parse_args("--name", "Alice")
        'Alice'
        >>> p.parse_args()
        'nobody'
        """
        p = self | Parser.return_(default)
        return replace(p, usage=f"[{self.usage}]" if self.usage else None)

    def parse(self, cs: Sequence[str], context: Optional[Context] = None) -> Result[Parse[A_co]]:
        """
        Applies the parser to the input sequence ``cs``.
        """
        return self.f(cs, Context() if context is None else context)

    def parse_args(self, *args: str) -> Any:
        """
        Parses ``args`` to the end with default preferences and returns the output.
        On failure, prints the usage and the error and returns ``None``.
        Meant for experimenting with parsers; applications should use
        :py:func:`exec_parser <applicative_helper.execution.exec_parser>`.
        """
        from applicative_helper.execution import Success, exec_parser_pure
        from applicative_helper.info import info

        result = exec_parser_pure(ParserPrefs(), info(self), args)
        if isinstance(result, Success):
            return result.value
        self._print(result.message)
        return None

    @staticmethod
    def _print(*args, **kwargs):
        if PRINTING:
            print(*args, **kwargs)

    @classmethod
    def return_(cls, a: A_co) -> "Parser[A_co]":  # type: ignore[override]
        """
        Consumes none of the input and always returns ``a`` as the result. This is
        ``pure`` for applicative parsers.

        >>> Parser.return_("value").parse_args()
        'value'
        """

        def f(cs: Sequence[str], _: Context) -> Result[Parse[A_co]]:
            return Result.return_(Parse(a, cs))

        return Parser(f, usage=None, helps={})

    def sat(
        self: "Parser[A]",
        predicate: Callable[[A], bool],
        on_fail: Callable[[A], ArgumentError],
    ) -> "Parser[A]":
        """
        Applies ``parser``, applies a predicate to the result and fails if this returns false.

        >>> p = option("x", type=int).sat(
        ...     lambda x: x > 0,
        ...     lambda x: ArgumentError(f"{x} must be positive."),
        ... )
        >>> p.parse_args("-x", "-1")
        usage: -x X
        -1 must be positive.
        >>> p.parse_args("-x", "2")
        2

        Parameters
        ----------

        predicate : Callable[[A], bool]
            The predicate to apply to the result of ``parser``. :py:meth:`Parser.sat` fails if this predicate returns false.

        on_fail : Callable[[A], ArgumentError]
            A function producing an ArgumentError to return if the predicate fails.
            Takes the output of ``parser`` as an argument.
        """

        def f(x: A) -> Result[A]:
            return Result(NonemptyList(x) if predicate(x) else on_fail(x))

        return self.apply(f)

    def type(self: "Parser[str]", f: Callable[[str], B]) -> "Parser[B]":
        """
        A wrapper around :py:meth:`Parser.apply` that converts the output with ``f``,
        turning exceptions into errors.

        >>> p = item("count").type(int)
        >>> p.parse_args("1")
        1
        >>> p.parse_args("one")
        usage: count
        argument one: raised exception invalid literal for int() with base 10: 'one'
        """

        def g(value: str) -> Result[B]:
            try:
                y = f(value)
            except Exception as e:
                usage = f"argument {value}: raised exception {e}"
                return Result(ArgumentError(usage))
            return Result.return_(y)

        return self.apply(g)

    @classmethod
    def zero(cls, error: Optional[ArgumentError] = None) -> "Parser[A_co]":  # type: ignore[override]
        """
        This parser always fails. It is the identity of
        :py:meth:`| <applicative_helper.parsers.Parser.__or__>`.

        Parameters
        ----------
        error : Optional[ArgumentError]
            Customize the error returned by :py:meth:`Parser.zero`.

        Examples
        --------

        >>> Parser.zero().parse_args()
        zero
        >>> Parser.zero().parse_args("a")
        zero
        >>> Parser.zero(error=ArgumentError("This is a test.")).parse_args("a")
        This is a test.
        """
        return Parser(lambda *_: Result.zero(error=error), usage=None, helps={})


def argument(
    dest: str,
    help: Optional[str] = None,
    type: Callable[[str], Any] = str,
) -> Parser[Any]:
    """
    Parses a single word. Useful for positional arguments.

    Parameters
    ----------

    dest : str
        The name of the argument, shown upper-cased in the usage.

    help : Optional[str]
        The help message to display for the argument.

    type : Callable[[str], Any]
        Use the ``type`` argument to convert the input to a different type.

    >>> argument("name").parse_args("Alice")
    'Alice'
    >>> argument("name").parse_args()
    usage: NAME
    The following arguments are required: name
    """
    parser: Parser[Any] = item(dest)
    if type is not str:
        parser = parser.type(type)
    helps = {dest.upper(): help} if help else {}
    return replace(parser, usage=dest.upper(), helps=helps)


def done() -> Parser[None]:
    """
    :py:func:`done` succeeds on the end of input and fails on everything else.

    >>> done().parse(Sequence(["arg"])).get
    UnexpectedError(usage='Unrecognized argument: arg', unexpected='arg')
    """

    def f(cs: Sequence[str], _: Context) -> Result[Parse[None]]:
        if cs:
            c, *_ = cs
            return Result(
                UnexpectedError(unexpected=c, usage=f"Unrecognized argument: {c}")
            )
        return Result.return_(Parse(parsed=None, unparsed=cs))

    return Parser(f, usage=None, helps={})


def flag(
    dest: str,
    default: Optional[bool] = None,
    help: Optional[str] = None,
    short: bool = True,
    string: Optional[str] = None,
) -> Parser[bool]:
    """
    Parses a boolean switch.

    >>> p = flag("verbose", default=False)
    >>> p.parse_args("--verbose")
    True
    >>> p.parse_args("-v")
    True
    >>> p.parse_args()
    False

    Parameters
    ----------

    dest : str
        The name of the flag. ``--{dest}`` sets it.

    default : Optional[bool]
        Value used when the flag is absent. If ``None``, the flag is required.
        When the flag is present, the parser outputs ``not default``.

    help : Optional[str]
        An optional help string.

    short : bool
        Whether to also accept the short form of the flag, which
        uses a single dash and the first character of ``dest``, e.g. ``-v`` for ``verbose``.

    string : Optional[str]
        A custom string to use for the flag. Defaults to ``--{dest}``.
    """
    if string is None:
        _string = f"--{dest}" if len(dest) > 1 else f"-{dest}"
    else:
        _string = string

    parser: Parser[Any] = matches(_string)
    if short and string is None and len(dest) > 1:
        parser = parser | matches(f"-{dest[0]}")
    parser = parser.map(lambda _: not default)
    if default is not None:
        help = f"{help + ' ' if help else ''}(default: {default})"
        parser = parser | Parser.return_(default)
    helps = {_string: help} if help else {}
    return replace(parser, usage=_string if default is None else f"[{_string}]", helps=helps)


def _selects_command(c: str, context: Context) -> bool:
    if c in context.commands:
        return True
    return context.prefs.disambiguate and any(n.startswith(c) for n in context.commands)


def _help_parser(strings: Tuple[str, ...], error: ArgumentError) -> Parser[Callable[[A], A]]:
    # Words after a command name belong to that command and its own helper.
    def f(cs: Sequence[str], context: Context) -> Result[Parse[Callable[[A], A]]]:
        for c in cs:
            if c in strings:
                return Result(error)
            if _selects_command(c, context):
                break
        return Result.return_(Parse(parsed=_identity, unparsed=cs))

    return Parser(f, usage=None, helps={})


def helper() -> Parser[Callable[[A], A]]:
    """
    Outputs the identity function unless ``--help`` or ``-h`` appears among the words,
    in which case the parse fails with a
    :py:class:`HelpError <applicative_helper.errors.HelpError>`.
    The search stops at the first word that names a subcommand of the parser
    that follows, so that ``prog cmd --help`` is left for ``cmd``'s own helper.
    Combine it with another parser using :py:meth:`Parser.ap`:

    >>> p = helper().ap(argument("name"))
    >>> p.parse_args("Alice")
    'Alice'
    >>> p.parse_args("--help")
    usage: NAME
    <BLANKLINE>
    -h, --help: Show this help text
    >>> p.parse_args("Alice", "-h")
    usage: NAME
    <BLANKLINE>
    -h, --help: Show this help text
    """
    p = _help_parser(("--help", "-h"), HelpError(usage="Help requested."))
    return replace(p, helps={"-h, --help": "Show this help text"})


def version_option(
    version: str, string: str = "--version", help: str = "Show version information"
) -> Parser[Callable[[A], A]]:
    """
    Like :py:func:`helper`, but answers ``--version`` with ``version``.

    >>> p = version_option("1.2.3").ap(argument("name"))
    >>> p.parse_args("--version")
    1.2.3
    """
    p = _help_parser((string,), VersionError(usage=version))
    return replace(p, helps={string: help})


def item(
    name: str,
    usage_name: Optional[str] = None,
) -> Parser[str]:
    """
    Parses a single word.
    One of the lowest level building blocks for parsers.

    Parameters
    ----------

    usage_name : Optional[str]
        Used for generating usage text

    Examples
    --------

    >>> p = item("name", usage_name="Your first name")
    >>> p.parse_args("Alice")
    'Alice'
    >>> p.parse_args()
    usage: name
    The following arguments are required: Your first name
    """

    def f(cs: Sequence[str], _: Context) -> Result[Parse[str]]:
        if cs:
            head, *tail = cs
            return Result.return_(Parse(parsed=head, unparsed=Sequence(tail)))
        return Result(
            MissingError(
                missing=name,
                usage=f"The following arguments are required: {usage_name or name}",
            )
        )

    return Parser(f, usage=name, helps={})


def lift(f: Callable[..., B], *parsers: Parser[Any]) -> Parser[B]:
    """
    Runs ``parsers`` one after the other and calls ``f`` with their outputs.

    >>> p = lift(lambda name, n: name * n, argument("name"), argument("n", type=int))
    >>> p.parse_args("ab", "3")
    'ababab'
    >>> p.usage
    'NAME N'
    """

    def go(i: int, values: Tuple[Any, ...]) -> Parser[B]:
        if i == len(parsers):
            return Parser.return_(f(*values))
        return parsers[i] >= (lambda value: go(i + 1, (*values, value)))

    usage = " ".join([p.usage for p in parsers if p.usage]) or None
    helps = {k: v for p in parsers for k, v in p.helps.items()}
    commands = tuple(dict.fromkeys(c for p in parsers for c in p.commands))
    return replace(go(0, ()), usage=usage, helps=helps, commands=commands)


def matches(s: str) -> Parser[str]:
    """
    Checks if the next word is ``s``.

    >>> matches("hello").parse_args("hello")
    'hello'
    >>> matches("hello").parse_args("goodbye")
    usage: hello
    Expected 'hello'. Got 'goodbye'

    Parameters
    ----------
    s: str
        The word that the input will be checked against for equality.
    """

    def on_fail(_s: str) -> ArgumentError:
        return UnequalError(left=s, right=_s, usage=f"Expected '{s}'. Got '{_s}'")

    return sat(predicate=lambda _s: _s == s, on_fail=on_fail, name=s)


def option(
    dest: str,
    flag: Optional[str] = None,
    default: Any = None,
    help: Optional[str] = None,
    short: bool = True,
    type: Callable[[str], Any] = str,
) -> Parser[Any]:
    """
    Parses two words, outputting the second.

    Parameters
    ----------
    dest : str
        The name of the option.

    flag : Optional[str]
        The flag to use for the option. If not provided, defaults to ``--{dest}``.

    default : Optional[Any]
        The value to output when the option is absent. If ``None``, the option is required.

    help : Optional[str]
        The help message to display for the option.

    short : bool
        Whether to also accept the short form of the flag, which
        uses a single dash and the first character of ``dest``, e.g. ``-c`` for ``count``.

    type : Callable[[str], Any]
        Use the ``type`` argument to convert the input to a different type.

    Examples
    --------

    >>> option("count", type=int).parse_args("--count", "1")
    1
    >>> option("count", flag="ct").parse_args("ct", "1")
    '1'
    >>> option("count", default=2).parse_args()
    2
    >>> option("count", short=False).parse_args("-c", "1")
    usage: --count COUNT
    Expected '--count'. Got '-c'
    """
    if flag is None:
        _flag = f"--{dest}" if len(dest) > 1 else f"-{dest}"
    else:
        _flag = flag

    parser: Parser[Any] = matches(_flag)
    if short and flag is None and len(dest) > 1:
        parser = parser | matches(f"-{dest[0]}")
    parser = parser >= (lambda _: item(dest, usage_name=dest.upper()))
    if type is not str:
        parser = parser.type(type)
    usage = f"{_flag} {dest.upper()}"
    if default is not None:
        help = f"{help + ' ' if help else ''}(default: {default})"
        parser = parser | Parser.return_(default)
        usage = f"[{usage}]"
    helps = {_flag: help} if help else {}
    return replace(parser, usage=usage, helps=helps)


def sat(
    predicate: Callable[[str], bool],
    on_fail: Callable[[str], ArgumentError],
    name: str,
) -> Parser[str]:
    """
    A wrapper around :py:meth:`Parser.sat` that uses :py:func:`item` to parse the argument
    and just applies ``predicate`` to the word output by :py:func:`item`.

    >>> p = sat(lambda x: len(x) == 1, lambda x: ArgumentError(f"'{x}' must have exactly one character."), "x")
    >>> p.parse_args("a")
    'a'
    >>> p.parse_args("aa")
    usage: x
    'aa' must have exactly one character.
    """
    return item(name).sat(predicate, on_fail)
