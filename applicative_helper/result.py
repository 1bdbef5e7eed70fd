"""
Defines the :py:class:`Result` dataclass, representing success or failure, output by parsers.
"""
from dataclasses import dataclass
from functools import reduce
from typing import Callable, Optional, Tuple, Type, TypeVar

from pytypeclass import Monad, MonadPlus
from pytypeclass.nonempty_list import NonemptyList

from applicative_helper.errors import (
    ArgumentError,
    CommandError,
    HelpError,
    VersionError,
    ZeroError,
)

A_co = TypeVar("A_co", covariant=True)
A = TypeVar("A")
B = TypeVar("B")

# When both sides fail, the first class in this list that matches wins.
PRECEDENCE: Tuple[Tuple[type, ...], ...] = (
    (HelpError, VersionError),
    (CommandError,),
)


@dataclass
class Result(MonadPlus[A_co]):
    """
    Either a nonempty list of successful outputs or an
    :py:class:`ArgumentError <applicative_helper.errors.ArgumentError>`.

    >>> Result.return_(1) | Result.return_(2)
    Result(get=[1, 2])
    >>> Result.zero() | Result.return_(2)
    Result(get=[2])
    >>> Result(ArgumentError("left")) | Result(ArgumentError("right"))
    Result(get=ArgumentError(usage='left'))
    >>> Result.zero() | Result(ArgumentError("right"))
    Result(get=ArgumentError(usage='right'))
    """

    get: "NonemptyList[A_co] | ArgumentError"

    def __or__(self, other: "Result[B]") -> "Result[A_co | B]":  # type: ignore[override]
        a = self.get
        b = other.get
        if isinstance(a, NonemptyList) and isinstance(b, NonemptyList):
            return Result(a + b)

        for get in [a, b]:
            if isinstance(get, NonemptyList):
                return Result(get)
        for types in PRECEDENCE:
            for get in [a, b]:
                if isinstance(get, types):
                    return Result(get)
        for get in [a, b]:
            if isinstance(get, ArgumentError) and not isinstance(get, ZeroError):
                return Result(get)
        for get in [a, b]:
            if isinstance(get, ArgumentError):
                return Result(get)
        raise RuntimeError("Unreachable")

    def __ge__(self, f: Callable[[A_co], Monad[B]]) -> "Result[B]":  # type: ignore[override]
        return self.bind(f)

    def bind(self, f: Callable[[A_co], Monad[B]]) -> "Result[B]":  # type: ignore[override]
        x = self.get
        if isinstance(x, ArgumentError):
            return Result(x)
        else:

            def g(acc: Result[B], new: A_co) -> Result[B]:  # type: ignore[misc]
                y = f(new)
                assert isinstance(y, Result), y
                a = acc.get
                b = y.get

                if isinstance(a, NonemptyList) and isinstance(b, NonemptyList):
                    return Result(a + b)

                return next(
                    (x for x in (acc, y) if isinstance(x.get, NonemptyList)),
                    acc,
                )

            tail = [] if x.tail is None else list(x.tail)
            y = f(x.head)
            assert isinstance(y, Result), y
            return reduce(g, tail, y)

    @classmethod
    def return_(cls: "Type[Result[A]]", a: A) -> "Result[A]":  # type: ignore[override]
        return Result(NonemptyList(a))

    @classmethod
    def zero(cls, error: Optional[ArgumentError] = None) -> "Result[A_co]":  # type: ignore[override]
        return Result(ZeroError("zero") if error is None else error)
