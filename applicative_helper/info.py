"""
Defines :py:class:`ParserInfo`, a parser packaged with the text describing it.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Generic, List, Optional, TypeVar

from applicative_helper.data_structures import Sequence
from applicative_helper.errors import HelpError
from applicative_helper.modifiers import InfoMod
from applicative_helper.parsers import Context, Parse, Parser, done
from applicative_helper.result import Result

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")


@dataclass(frozen=True)
class ParserInfo(Generic[A_co]):
    """
    A parser together with its description. Build one with :py:func:`info`.
    """

    parser: Parser[A_co]
    full_desc: bool = True
    prog_desc: Optional[str] = None
    header: Optional[str] = None
    footer: Optional[str] = None
    failure_code: int = 1

    def help_text(self, prog: str = "") -> str:
        """
        >>> from applicative_helper.modifiers import footer, prog_desc
        >>> from applicative_helper.parsers import flag
        >>> p = flag("verbose", default=False, help="Talk more.")
        >>> print(info(p, prog_desc("Does things.") | footer("See the manual.")).help_text("prog"))
        usage: prog [--verbose]
        <BLANKLINE>
        Does things.
        <BLANKLINE>
        --verbose: Talk more. (default: False)
        <BLANKLINE>
        See the manual.
        """
        lines: List[str] = []
        if self.header:
            lines += [self.header, ""]
        lines.append(self.usage_text(prog) or "usage: Usage not provided.")
        if self.prog_desc:
            lines += ["", self.prog_desc]
        if self.full_desc and self.parser.helps:
            lines.append("")
            lines += [f"{k}: {v}" for k, v in self.parser.helps.items()]
        if self.footer:
            lines += ["", self.footer]
        return "\n".join(lines)

    def run(self, cs: Sequence[str], context: Context) -> Result[Parse[A_co]]:
        """
        Applies the parser to ``cs`` and requires that it consume all of it.
        """
        p = self.parser >= (lambda a: done().map(lambda _: a))
        result = p.parse(cs, context)
        error = result.get
        if isinstance(error, HelpError) and error.info is None:
            return Result(replace(error, info=self))
        return result

    def usage_text(self, prog: str = "") -> Optional[str]:
        usage = " ".join([x for x in (prog, self.parser.usage) if x])
        return f"usage: {usage}" if usage else None


def info(parser: Parser[A], mod: InfoMod = InfoMod.zero()) -> ParserInfo[A]:
    """
    Packages ``parser`` with the settings described by ``mod``.

    >>> from applicative_helper.modifiers import brief_desc, prog_desc
    >>> from applicative_helper.parsers import argument
    >>> i = info(argument("name"), brief_desc() | prog_desc("Greets someone."))
    >>> i.full_desc, i.prog_desc
    (False, 'Greets someone.')
    """
    settings = mod.fold()
    return ParserInfo(
        parser=parser,
        full_desc=settings.full_desc,
        prog_desc=settings.prog_desc,
        header=settings.header,
        footer=settings.footer,
        failure_code=settings.failure_code,
    )
