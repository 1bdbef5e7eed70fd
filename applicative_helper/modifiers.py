"""
Defines :py:class:`InfoMod` and :py:class:`PrefsMod`, the monoids used to configure
a :py:class:`ParserInfo <applicative_helper.info.ParserInfo>` and
:py:class:`ParserPrefs`.

Each modifier is an ordered tuple of variants drawn from a small closed set.
Modifiers combine with ``|`` (or ``+``), and :py:meth:`InfoMod.zero` /
:py:meth:`PrefsMod.zero` is the identity:

>>> mod = prog_desc("Count things") | header("counter 1.0")
>>> mod.fold()
InfoSettings(full_desc=True, prog_desc='Count things', header='counter 1.0', footer=None, failure_code=1)

Variants are applied left to right, so later variants win:

>>> (prog_desc("first") | prog_desc("second")).fold().prog_desc
'second'
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from functools import reduce
from typing import Optional, Tuple, Type, Union

from pytypeclass import Monoid


@dataclass(frozen=True)
class FullDesc:
    full: bool


@dataclass(frozen=True)
class ProgDesc:
    text: str


@dataclass(frozen=True)
class Header:
    text: str


@dataclass(frozen=True)
class Footer:
    text: str


@dataclass(frozen=True)
class FailureCode:
    code: int


InfoModifier = Union[FullDesc, ProgDesc, Header, Footer, FailureCode]


@dataclass(frozen=True)
class InfoSettings:
    full_desc: bool = True
    prog_desc: Optional[str] = None
    header: Optional[str] = None
    footer: Optional[str] = None
    failure_code: int = 1

    def update(self, modifier: InfoModifier) -> "InfoSettings":
        if isinstance(modifier, FullDesc):
            return replace(self, full_desc=modifier.full)
        if isinstance(modifier, ProgDesc):
            return replace(self, prog_desc=modifier.text)
        if isinstance(modifier, Header):
            return replace(self, header=modifier.text)
        if isinstance(modifier, Footer):
            return replace(self, footer=modifier.text)
        if isinstance(modifier, FailureCode):
            return replace(self, failure_code=modifier.code)
        raise TypeError(f"Unknown info modifier: {modifier!r}")


@dataclass(frozen=True)
class InfoMod(Monoid[InfoModifier]):
    modifiers: Tuple[InfoModifier, ...] = ()

    def __or__(self, other: InfoMod) -> InfoMod:  # type: ignore[override]
        return InfoMod((*self.modifiers, *other.modifiers))

    def __add__(self, other: InfoMod) -> InfoMod:
        return self | other

    def fold(self, settings: InfoSettings = InfoSettings()) -> InfoSettings:
        return reduce(InfoSettings.update, self.modifiers, settings)

    @classmethod
    def zero(cls: Type[InfoMod]) -> InfoMod:  # type: ignore[override]
        return InfoMod()


def full_desc() -> InfoMod:
    """
    List every help entry in the help text. This is the default.
    """
    return InfoMod((FullDesc(True),))


def brief_desc() -> InfoMod:
    """
    Only show the usage line and description in the help text.

    >>> (full_desc() | brief_desc()).fold().full_desc
    False
    """
    return InfoMod((FullDesc(False),))


def prog_desc(text: str) -> InfoMod:
    return InfoMod((ProgDesc(text),))


def header(text: str) -> InfoMod:
    return InfoMod((Header(text),))


def footer(text: str) -> InfoMod:
    return InfoMod((Footer(text),))


def failure_code(code: int) -> InfoMod:
    """
    Exit code used when parsing fails. Defaults to 1.
    """
    return InfoMod((FailureCode(code),))


@dataclass(frozen=True)
class Disambiguate:
    pass


@dataclass(frozen=True)
class ShowHelpOnError:
    pass


@dataclass(frozen=True)
class ShowHelpOnEmpty:
    pass


PrefsModifier = Union[Disambiguate, ShowHelpOnError, ShowHelpOnEmpty]


@dataclass(frozen=True)
class ParserPrefs:
    """
    Global parsing behavior, built with :py:func:`prefs`.

    Parameters
    ----------

    disambiguate : bool
        Match a command by any unambiguous prefix of its name.

    show_help_on_error : bool
        Print the full help text, not just the usage line, when parsing fails.

    show_help_on_empty : bool
        Print the help text when parsing fails and no arguments were given.
    """

    disambiguate: bool = False
    show_help_on_error: bool = False
    show_help_on_empty: bool = False

    def update(self, modifier: PrefsModifier) -> "ParserPrefs":
        if isinstance(modifier, Disambiguate):
            return replace(self, disambiguate=True)
        if isinstance(modifier, ShowHelpOnError):
            return replace(self, show_help_on_error=True)
        if isinstance(modifier, ShowHelpOnEmpty):
            return replace(self, show_help_on_empty=True)
        raise TypeError(f"Unknown preference modifier: {modifier!r}")


@dataclass(frozen=True)
class PrefsMod(Monoid[PrefsModifier]):
    modifiers: Tuple[PrefsModifier, ...] = ()

    def __or__(self, other: PrefsMod) -> PrefsMod:  # type: ignore[override]
        return PrefsMod((*self.modifiers, *other.modifiers))

    def __add__(self, other: PrefsMod) -> PrefsMod:
        return self | other

    def fold(self, settings: ParserPrefs = ParserPrefs()) -> ParserPrefs:
        return reduce(ParserPrefs.update, self.modifiers, settings)

    @classmethod
    def zero(cls: Type[PrefsMod]) -> PrefsMod:  # type: ignore[override]
        return PrefsMod()


def disambiguate() -> PrefsMod:
    return PrefsMod((Disambiguate(),))


def show_help_on_error() -> PrefsMod:
    return PrefsMod((ShowHelpOnError(),))


def show_help_on_empty() -> PrefsMod:
    return PrefsMod((ShowHelpOnEmpty(),))


def prefs(mod: PrefsMod) -> ParserPrefs:
    """
    Turns a :py:class:`PrefsMod` into :py:class:`ParserPrefs`.

    >>> prefs(disambiguate())
    ParserPrefs(disambiguate=True, show_help_on_error=False, show_help_on_empty=False)
    >>> prefs(PrefsMod.zero()) == ParserPrefs()
    True
    """
    return mod.fold()
