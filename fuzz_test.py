from random import Random
from typing import List, NamedTuple

from hypothesis import given, register_random, settings
from hypothesis import strategies as st
from pytypeclass.nonempty_list import NonemptyList

from applicative_helper import (
    Failure,
    Parser,
    ParserPrefs,
    Success,
    argument,
    command,
    exec_parser_pure,
    flag,
    fp_desc,
    info,
    info_helper,
    item,
    matches,
    option,
    parsers,
    subconcat,
)
from applicative_helper.data_structures import Sequence
from applicative_helper.errors import ZeroError
from applicative_helper.helper import altconcat

MAX_RANDOM = 5
MAX_ALTERNATIVES = 3
MAX_LEAVES = 4
MAX_COMMANDS = 4


class StOutput(NamedTuple):
    parser: Parser
    inputs: List[str]
    repr: str


@st.composite
def st_argument(draw) -> StOutput:
    dest = draw(st.text(min_size=1))
    help = draw(st_optional_str)
    return StOutput(
        parser=argument(dest=dest, help=help),
        inputs=[draw(st.text())],
        repr=f"argument(dest={repr(dest)}, help={repr(help)})",
    )


@st.composite
def st_flag(draw) -> StOutput:
    dest = draw(st.text(min_size=1))
    default = draw(st.booleans() | st.none())
    string = f"--{dest}" if len(dest) > 1 else f"-{dest}"
    inputs = draw(st.sampled_from([[string], []])) if default is not None else [string]
    return StOutput(
        parser=flag(dest=dest, default=default),
        inputs=inputs,
        repr=f"flag(dest={repr(dest)}, default={default})",
    )


@st.composite
def st_item(draw) -> StOutput:
    name = draw(st.text())
    return StOutput(parser=item(name), inputs=[draw(st.text())], repr=f"item({repr(name)})")


@st.composite
def st_matches(draw) -> StOutput:
    s = draw(st.text())
    return StOutput(parser=matches(s), inputs=[s], repr=f"matches({repr(s)})")


@st.composite
def st_option(draw) -> StOutput:
    dest = draw(st.text(min_size=1))
    _flag = f"--{dest}" if len(dest) > 1 else f"-{dest}"
    return StOutput(
        parser=option(dest=dest),
        inputs=[_flag, draw(st.text())],
        repr=f"option(dest={repr(dest)})",
    )


@st.composite
def st_return(draw) -> StOutput:
    value = draw(st.integers())
    return StOutput(parser=Parser.return_(value), inputs=[], repr=f"Parser.return_({value})")


@st.composite
def st_altconcat(draw, _st_parser_with_input) -> StOutput:
    parser_with_input = draw(st.lists(_st_parser_with_input, max_size=MAX_ALTERNATIVES))
    if parser_with_input:
        _parsers, inputs, reprs = zip(*parser_with_input)
        input = draw(st.sampled_from(inputs))
    else:
        _parsers = reprs = ()
        input = []
    return StOutput(
        parser=altconcat(list(_parsers)),
        inputs=list(input),
        repr=f"altconcat([{', '.join(reprs)}])",
    )


st_optional_str = st.text() | st.none()
st_zero = st.just(StOutput(parser=Parser.zero(), inputs=[], repr="Parser.zero()"))
st_simple_parser_with_input = st.deferred(
    lambda: st_argument()
    | st_flag()
    | st_item()
    | st_matches()
    | st_option()
    | st_return()
    | st_zero
)
st_parser_with_input = st.recursive(
    st_simple_parser_with_input,
    st_altconcat,
    max_leaves=MAX_LEAVES,
)


@st.composite
def st_parser_with_random_input(draw) -> StOutput:
    parser, inputs, repr = draw(st_parser_with_input)
    random_inputs = draw(st.lists(st.text(), max_size=MAX_RANDOM))
    return StOutput(
        parser=parser,
        inputs=draw(st.sampled_from([inputs, random_inputs])),
        repr=repr,
    )


def outcome(parser: Parser, inputs: List[str]):
    get = parser.parse(Sequence(list(inputs))).get
    if isinstance(get, NonemptyList):
        return get.head
    return get


@settings(deadline=None)
@given(st.lists(st.text(), max_size=MAX_RANDOM))
def test_empty_altconcat_fails(inputs):
    assert isinstance(outcome(altconcat([]), inputs), ZeroError)


@settings(deadline=None)
@given(
    st.lists(st_parser_with_input, max_size=MAX_ALTERNATIVES),
    st.lists(st.text(), max_size=MAX_RANDOM),
)
def test_first_success_wins(parsers_with_input, inputs):
    _parsers = [p for p, _, _ in parsers_with_input]
    print([r for _, _, r in parsers_with_input])
    expected = next(
        (o for o in (outcome(p, inputs) for p in _parsers) if not isinstance(o, Exception)),
        None,
    )
    actual = outcome(altconcat(_parsers), inputs)
    if expected is None:
        assert isinstance(actual, Exception)
    else:
        assert actual == expected


@settings(deadline=None)
@given(
    st_parser_with_random_input(),
    st_parser_with_input,
    st_parser_with_input,
)
def test_altconcat_associativity(a, b, c):
    print(a.repr, b.repr, c.repr)
    flat = altconcat([a.parser, b.parser, c.parser])
    nested = altconcat([a.parser, altconcat([b.parser, c.parser])])
    assert outcome(flat, a.inputs) == outcome(nested, a.inputs)


@settings(deadline=None)
@given(
    st.lists(st.text(min_size=1), unique=True, min_size=1, max_size=MAX_COMMANDS),
    st.data(),
)
def test_subconcat_selects_named_command(names, data):
    parser = subconcat(
        [command(name, info(Parser.return_(i))) for i, name in enumerate(names)]
    )
    i = data.draw(st.integers(min_value=0, max_value=len(names) - 1))
    assert exec_parser_pure(ParserPrefs(), info(parser), [names[i]]) == Success(i)
    unknown = data.draw(st.text().filter(lambda t: t not in names))
    assert isinstance(exec_parser_pure(ParserPrefs(), info(parser), [unknown]), Failure)


@settings(deadline=None)
@given(st.text())
def test_fp_desc(text):
    parser_info = info(Parser.return_(None), fp_desc(text))
    assert parser_info.full_desc
    assert parser_info.prog_desc == text


@settings(deadline=None)
@given(
    st_parser_with_random_input(),
    st.sampled_from(["--help", "-h"]),
    st.lists(st.text(), max_size=MAX_RANDOM),
)
def test_help_wins(parser_with_input, help_flag, trailing):
    parser, inputs, repr = parser_with_input
    print(repr)
    args = [*inputs, help_flag, *trailing]
    result = exec_parser_pure(ParserPrefs(), info_helper(parser), args)
    assert isinstance(result, Failure)
    assert result.exit_code == 0
    assert result.stream == "stdout"


if __name__ == "__main__":
    parsers.PRINTING = False

    register_random(Random(0))

    test_empty_altconcat_fails()
    test_first_success_wins()
    test_altconcat_associativity()
    test_subconcat_selects_named_command()
    test_fp_desc()
    test_help_wins()
