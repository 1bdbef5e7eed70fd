#! /usr/bin/env python
import doctest
import importlib
import io
import sys
import unittest
from abc import ABC, abstractmethod
from contextlib import redirect_stderr, redirect_stdout
from dataclasses import dataclass
from enum import Enum
from unittest import mock

import applicative_helper
from applicative_helper import (
    Failure,
    InfoMod,
    Parser,
    ParserPrefs,
    PrefsMod,
    Success,
    argument,
    command,
    exec_parser_pure,
    flag,
    footer,
    fp_desc,
    full_desc,
    header,
    helper_exec_parser,
    helper_prefs,
    info,
    info_helper,
    item,
    lift,
    matches,
    option,
    prefs,
    prog_desc,
    show_help_on_empty,
    subconcat,
    version_option,
)
from applicative_helper import commands, data_structures, execution, modifiers, parsers, result
from applicative_helper.commands import CommandFields
from applicative_helper.data_structures import Sequence
from applicative_helper.errors import (
    AmbiguousError,
    ArgumentError,
    CommandError,
    HelpError,
    ZeroError,
)
from applicative_helper.helper import altconcat, helper_prefs_mod
from applicative_helper.modifiers import disambiguate, show_help_on_error


def load_tests(_, tests, __):
    for mod in [
        applicative_helper,
        commands,
        data_structures,
        execution,
        importlib.import_module("applicative_helper.helper"),
        importlib.import_module("applicative_helper.info"),
        modifiers,
        parsers,
        result,
    ]:
        tests.addTests(doctest.DocTestSuite(mod))
    return tests


class ParserResult(Enum):
    RESULT1 = 1
    RESULT2 = 2
    RESULT3 = 3


def demo_parser() -> Parser:
    return subconcat(
        [
            command(
                "result1", info_helper(Parser.return_(ParserResult.RESULT1), fp_desc("Result1"))
            ),
            command(
                "result2", info_helper(Parser.return_(ParserResult.RESULT2), fp_desc("Result2"))
            ),
            command(
                "result3", info_helper(Parser.return_(ParserResult.RESULT3), fp_desc("Result3"))
            ),
        ]
    )


def demo_info():
    return info_helper(demo_parser(), fp_desc("Demonstration"))


def outcome(parser: Parser, *tokens: str):
    get = parser.parse(Sequence(list(tokens))).get
    if isinstance(get, Exception):
        return get
    return get.head.parsed


class MonadLawTester(ABC):
    @abstractmethod
    def assertEqual(self, a, b):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def return_(a):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def f1(a):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def f2(a):
        raise NotImplementedError

    @staticmethod
    def unwrapped_values():
        return [1, "a"]

    @staticmethod
    @abstractmethod
    def wrapped_values():
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def unwrap(x):
        raise NotImplementedError

    def test_law1(self):
        for a in self.unwrapped_values():
            x1 = self.return_(a) >= self.f1
            x2 = self.f1(a)
            self.assertEqual(self.unwrap(x1), self.unwrap(x2))

    def test_law2(self):
        for p in self.wrapped_values():
            a = p >= self.return_
            self.assertEqual(self.unwrap(a), self.unwrap(p))

    def test_law3(self):
        for p in self.wrapped_values():
            x1 = p >= (lambda a: self.f1(a) >= self.f2)
            x2 = (p >= self.f1) >= self.f2
            self.assertEqual(self.unwrap(x1), self.unwrap(x2))


class TestParserMonad(unittest.TestCase, MonadLawTester):
    @staticmethod
    def return_(a):
        return Parser.return_(a)

    @staticmethod
    def f1(a):
        return item("next").map(lambda b: (a, b))

    @staticmethod
    def f2(a):
        return Parser.return_(repr(a))

    @staticmethod
    def wrapped_values():
        return [item("first"), Parser.return_(3), matches("x").map(len), Parser.zero()]

    @staticmethod
    def unwrap(x):
        return x.parse(Sequence(["x", "y", "z"])).get


class TestResultMonad(unittest.TestCase, MonadLawTester):
    @staticmethod
    def return_(a):
        return result.Result.return_(a)

    @staticmethod
    def f1(a):
        return result.Result.return_((a, a))

    @staticmethod
    def f2(a):
        return result.Result.return_(repr(a))

    @staticmethod
    def wrapped_values():
        return [
            result.Result.return_(1),
            result.Result.return_(1) | result.Result.return_(2),
            result.Result.zero(),
        ]

    @staticmethod
    def unwrap(x):
        return x.get


class MonoidLawTester(ABC):
    @abstractmethod
    def assertEqual(self, a, b):
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def zero():
        raise NotImplementedError

    @staticmethod
    @abstractmethod
    def values():
        raise NotImplementedError

    def test_identity(self):
        for a in self.values():
            self.assertEqual(self.zero() | a, a)
            self.assertEqual(a | self.zero(), a)

    def test_associativity(self):
        for a in self.values():
            for b in self.values():
                for c in self.values():
                    self.assertEqual((a | b) | c, a | (b | c))


class TestInfoModMonoid(unittest.TestCase, MonoidLawTester):
    @staticmethod
    def zero():
        return InfoMod.zero()

    @staticmethod
    def values():
        return [full_desc(), prog_desc("a"), header("b") | footer("c")]


class TestPrefsModMonoid(unittest.TestCase, MonoidLawTester):
    @staticmethod
    def zero():
        return PrefsMod.zero()

    @staticmethod
    def values():
        return [disambiguate(), show_help_on_error(), show_help_on_empty()]


class TestCommandFieldsMonoid(unittest.TestCase, MonoidLawTester):
    @staticmethod
    def zero():
        return CommandFields.zero()

    @staticmethod
    def values():
        i = info(Parser.return_(None))
        return [command("a", i), command("b", i) | command("c", i)]


class TestAltconcat(unittest.TestCase):
    def test_empty_always_fails(self):
        for tokens in [(), ("a",), ("--help",), ("a", "b", "c")]:
            self.assertIsInstance(outcome(altconcat([]), *tokens), ZeroError)

    def test_first_match_wins(self):
        a = matches("go").map(lambda _: "A")
        b = matches("go").map(lambda _: "B")
        c = item("anything").map(lambda _: "C")
        p = altconcat([a, b, c])
        self.assertEqual(outcome(p, "go"), "A")
        self.assertEqual(outcome(p, "stop"), "C")

    def test_later_alternatives_are_not_run_after_a_success(self):
        calls = []

        def record(cs, _):
            calls.append(list(cs))
            return result.Result.zero()

        p = altconcat([matches("go"), Parser(record, usage=None, helps={})])
        self.assertEqual(outcome(p, "go"), "go")
        self.assertEqual(calls, [])

    def test_nesting_does_not_change_behavior(self):
        a = matches("x").map(lambda _: "A")
        b = matches("y").map(lambda _: "B")
        c = item("name").map(lambda s: s.upper())
        flat = altconcat([a, b, c])
        nested = altconcat([a, altconcat([b, c])])
        for tokens in [(), ("x",), ("y",), ("z",), ("x", "y")]:
            self.assertEqual(outcome(flat, *tokens), outcome(nested, *tokens))

    def test_usage(self):
        self.assertEqual(
            altconcat([flag("verbose"), option("count")]).usage,
            "[--verbose | --count COUNT]",
        )
        self.assertIsNone(altconcat([]).usage)


class TestSubconcat(unittest.TestCase):
    def test_selects_command(self):
        p = demo_parser()
        self.assertEqual(outcome(p, "result1"), ParserResult.RESULT1)
        self.assertEqual(outcome(p, "result2"), ParserResult.RESULT2)
        self.assertEqual(outcome(p, "result3"), ParserResult.RESULT3)

    def test_unknown_command_fails(self):
        self.assertIsInstance(outcome(demo_parser(), "result4"), Exception)
        self.assertIsInstance(outcome(demo_parser()), Exception)

    def test_commands_and_helps(self):
        p = demo_parser()
        self.assertEqual(p.commands, ("result1", "result2", "result3"))
        self.assertEqual(
            p.helps, {"result1": "Result1", "result2": "Result2", "result3": "Result3"}
        )

    def test_arguments_are_handed_to_command(self):
        p = subconcat(
            [
                command("add", info_helper(argument("name").map(lambda n: ("add", n)))),
                command("remove", info_helper(argument("name").map(lambda n: ("remove", n)))),
            ]
        )
        self.assertEqual(outcome(p, "remove", "origin"), ("remove", "origin"))
        error = outcome(p, "add")
        self.assertIsInstance(error, CommandError)
        self.assertEqual(error.path, ("add",))


class TestDisambiguate(unittest.TestCase):
    def setUp(self):
        self.info = info_helper(
            subconcat(
                [
                    command("start", info_helper(Parser.return_("start"))),
                    command("stop", info_helper(Parser.return_("stop"))),
                    command("status", info_helper(Parser.return_("status"))),
                ]
            )
        )

    def test_unambiguous_prefix(self):
        self.assertEqual(exec_parser_pure(helper_prefs(), self.info, ["sto"]), Success("stop"))
        self.assertEqual(exec_parser_pure(helper_prefs(), self.info, ["star"]), Success("start"))

    def test_exact_name_beats_prefix(self):
        p = subconcat(
            [
                command("run", info(Parser.return_("run"))),
                command("runall", info(Parser.return_("runall"))),
            ]
        )
        self.assertEqual(exec_parser_pure(helper_prefs(), info(p), ["run"]), Success("run"))

    def test_ambiguous_prefix(self):
        get = self.info.run(Sequence(["sta"]), parsers.Context(prefs=helper_prefs())).get
        self.assertIsInstance(get, AmbiguousError)
        self.assertEqual(get.candidates, ("start", "status"))
        failure = exec_parser_pure(helper_prefs(), self.info, ["sta"])
        self.assertIsInstance(failure, Failure)
        self.assertIn("Ambiguous command 'sta'. Could be: start, status", failure.message)

    def test_prefix_without_disambiguate(self):
        failure = exec_parser_pure(ParserPrefs(), self.info, ["sto"])
        self.assertIsInstance(failure, Failure)
        self.assertTrue(failure.message.endswith("Invalid argument 'sto'"))


class TestFpDesc(unittest.TestCase):
    def test_sets_full_desc_and_prog_desc(self):
        for text in ["Demonstration", "with  spaces\tand\npunctuation!?", "ü"]:
            i = info(Parser.return_(None), fp_desc(text))
            self.assertTrue(i.full_desc)
            self.assertEqual(i.prog_desc, text)

    def test_equals_merge(self):
        self.assertEqual(fp_desc("x"), full_desc() | prog_desc("x"))

    def test_composes_with_other_modifiers(self):
        i = info(Parser.return_(None), header("h") | fp_desc("d") | footer("f"))
        self.assertEqual((i.header, i.prog_desc, i.footer, i.full_desc), ("h", "d", "f", True))


class TestHelperPrefs(unittest.TestCase):
    def test_contents(self):
        self.assertEqual(
            helper_prefs(),
            ParserPrefs(disambiguate=True, show_help_on_error=True, show_help_on_empty=False),
        )

    def test_memoized(self):
        self.assertIs(helper_prefs(), helper_prefs())

    def test_mod(self):
        self.assertEqual(prefs(helper_prefs_mod()), helper_prefs())


class TestInfoHelper(unittest.TestCase):
    def test_help_beats_parser(self):
        for p in [item("anything"), matches("--help"), flag("help"), Parser.zero()]:
            failure = exec_parser_pure(ParserPrefs(), info_helper(p), ["--help"])
            self.assertIsInstance(failure, Failure)
            self.assertEqual((failure.exit_code, failure.stream), (0, "stdout"))

    def test_short_help(self):
        get = info_helper(item("x")).run(Sequence(["-h"]), parsers.Context()).get
        self.assertIsInstance(get, HelpError)

    def test_parses_normally_without_help(self):
        self.assertEqual(
            exec_parser_pure(ParserPrefs(), info_helper(argument("name")), ["Alice"]),
            Success("Alice"),
        )

    def test_help_after_other_words(self):
        for p, args in [
            (argument("name"), ["Alice", "--help"]),
            (flag("verbose", default=False), ["--verbose", "--help"]),
            (lift(lambda a, b: (a, b), argument("a"), argument("b")), ["x", "-h"]),
        ]:
            failure = exec_parser_pure(ParserPrefs(), info_helper(p), args, prog="prog")
            self.assertEqual(
                failure, Failure(info_helper(p).help_text("prog"), exit_code=0, stream="stdout")
            )

    def test_help_after_subcommand_arguments(self):
        greet = info_helper(argument("name"), fp_desc("Greets someone."))
        i = info_helper(subconcat([command("greet", greet)]))
        failure = exec_parser_pure(helper_prefs(), i, ["greet", "Alice", "-h"], prog="prog")
        self.assertEqual(
            failure, Failure(greet.help_text("prog greet"), exit_code=0, stream="stdout")
        )

    def test_help_before_subcommand_is_top_level(self):
        failure = exec_parser_pure(helper_prefs(), demo_info(), ["--help", "result2"], prog="demo")
        self.assertEqual(failure.message, demo_info().help_text("demo"))

    def test_help_after_global_flag_and_subcommand(self):
        p = lift(lambda _, r: r, flag("verbose", default=False), demo_parser())
        failure = exec_parser_pure(
            helper_prefs(), info_helper(p), ["-v", "result2", "--help"], prog="demo"
        )
        self.assertEqual((failure.exit_code, failure.stream), (0, "stdout"))
        self.assertTrue(failure.message.startswith("usage: demo result2\n\nResult2"))


class TestExecParserPure(unittest.TestCase):
    def test_top_level_help(self):
        failure = exec_parser_pure(helper_prefs(), demo_info(), ["--help"], prog="demo")
        self.assertEqual(
            failure,
            Failure(
                "\n".join(
                    [
                        "usage: demo [result1 | result2 | result3]",
                        "",
                        "Demonstration",
                        "",
                        "-h, --help: Show this help text",
                        "result1: Result1",
                        "result2: Result2",
                        "result3: Result3",
                    ]
                ),
                exit_code=0,
                stream="stdout",
            ),
        )

    def test_subcommand_help(self):
        failure = exec_parser_pure(helper_prefs(), demo_info(), ["result2", "--help"], prog="demo")
        self.assertEqual(
            failure.message,
            "\n".join(
                [
                    "usage: demo result2",
                    "",
                    "Result2",
                    "",
                    "-h, --help: Show this help text",
                ]
            ),
        )

    def test_error_in_subcommand_shows_its_help(self):
        failure = exec_parser_pure(helper_prefs(), demo_info(), ["result2", "extra"], prog="demo")
        self.assertEqual((failure.exit_code, failure.stream), (1, "stderr"))
        self.assertTrue(failure.message.startswith("usage: demo result2\n\nResult2"))
        self.assertTrue(failure.message.endswith("Unrecognized argument: extra"))

    def test_error_without_show_help_on_error(self):
        failure = exec_parser_pure(ParserPrefs(), demo_info(), ["bogus"], prog="demo")
        self.assertEqual(
            failure.message,
            "usage: demo [result1 | result2 | result3]\nInvalid argument 'bogus'",
        )

    def test_missing_command(self):
        failure = exec_parser_pure(ParserPrefs(), demo_info(), [], prog="demo")
        self.assertTrue(failure.message.endswith("Missing: COMMAND"))

    def test_show_help_on_empty(self):
        i = info_helper(argument("name"), fp_desc("Greets someone."))
        failure = exec_parser_pure(prefs(show_help_on_empty()), i, [], prog="greet")
        self.assertEqual(failure, Failure(i.help_text("greet"), exit_code=1, stream="stderr"))

    def test_failure_code(self):
        i = info_helper(argument("name"), applicative_helper.failure_code(2))
        failure = exec_parser_pure(ParserPrefs(), i, [])
        self.assertEqual(failure.exit_code, 2)

    def test_version(self):
        i = info_helper(version_option("1.0").ap(argument("name")))
        self.assertEqual(
            exec_parser_pure(ParserPrefs(), i, ["--version"]),
            Failure("1.0", exit_code=0, stream="stdout"),
        )

    def test_brief_desc_hides_helps(self):
        i = info_helper(argument("name"), applicative_helper.brief_desc() | prog_desc("d"))
        self.assertEqual(i.help_text("p"), "usage: p NAME\n\nd")


class TestNestedCommands(unittest.TestCase):
    def setUp(self):
        remote = subconcat(
            [
                command("add", info_helper(argument("name"), fp_desc("Add a remote."))),
                command("remove", info_helper(argument("name"), fp_desc("Remove a remote."))),
            ]
        )
        self.info = info_helper(
            subconcat([command("remote", info_helper(remote, fp_desc("Manage remotes.")))])
        )

    def test_value(self):
        self.assertEqual(
            exec_parser_pure(helper_prefs(), self.info, ["remote", "add", "origin"]),
            Success("origin"),
        )

    def test_nested_prefixes(self):
        self.assertEqual(
            exec_parser_pure(helper_prefs(), self.info, ["rem", "remo", "origin"]),
            Success("origin"),
        )

    def test_nested_help(self):
        failure = exec_parser_pure(
            helper_prefs(), self.info, ["remote", "add", "--help"], prog="git"
        )
        self.assertTrue(failure.message.startswith("usage: git remote add NAME\n\nAdd a remote."))

    def test_nested_error(self):
        failure = exec_parser_pure(helper_prefs(), self.info, ["remote", "add"], prog="git")
        self.assertTrue(failure.message.startswith("usage: git remote add NAME"))
        self.assertTrue(
            failure.message.endswith("The following arguments are required: name")
        )


@dataclass
class Config:
    verbose: bool
    count: int
    file: str


class TestPrimitives(unittest.TestCase):
    def setUp(self):
        self.parser = lift(
            Config,
            flag("verbose", default=False, help="Talk more."),
            option("count", type=int, default=1),
            argument("file"),
        )

    def test_lift(self):
        self.assertEqual(
            outcome(self.parser, "-v", "--count", "3", "a.txt"), Config(True, 3, "a.txt")
        )
        self.assertEqual(outcome(self.parser, "a.txt"), Config(False, 1, "a.txt"))

    def test_lift_usage(self):
        self.assertEqual(self.parser.usage, "[--verbose] [--count COUNT] FILE")

    def test_type_error(self):
        failure = exec_parser_pure(ParserPrefs(), info(option("count", type=int)), ["-c", "x"])
        self.assertIn("argument x: raised exception", failure.message)

    def test_matches_consumes_word(self):
        get = matches("go").parse(Sequence(["go", "on"])).get
        self.assertEqual(get.head.parsed, "go")
        self.assertEqual(get.head.unparsed, Sequence(["on"]))

    def test_map_error(self):
        p = item("x").map_error(lambda e: ArgumentError(f"custom: {e.usage}"))
        self.assertEqual(
            outcome(p), ArgumentError("custom: The following arguments are required: x")
        )
        self.assertEqual(outcome(p, "a"), "a")

    def test_optional(self):
        p = argument("name").optional()
        self.assertEqual(outcome(p), None)
        self.assertEqual(p.usage, "[NAME]")


class TestHelperExecParser(unittest.TestCase):
    def test_args(self):
        self.assertEqual(
            helper_exec_parser(demo_parser(), fp_desc("Demonstration"), args=["result1"]),
            ParserResult.RESULT1,
        )

    def test_argv(self):
        with mock.patch.object(sys, "argv", ["demo", "result3"]):
            self.assertEqual(
                helper_exec_parser(demo_parser(), fp_desc("Demonstration")),
                ParserResult.RESULT3,
            )

    def test_prefix(self):
        p = subconcat(
            [
                command("install", info_helper(Parser.return_("install"))),
                command("remove", info_helper(Parser.return_("remove"))),
            ]
        )
        self.assertEqual(helper_exec_parser(p, args=["inst"]), "install")

    def test_help_exits_zero(self):
        stdout = io.StringIO()
        with mock.patch.object(sys, "argv", ["demo", "--help"]), redirect_stdout(stdout):
            with self.assertRaises(SystemExit) as cm:
                helper_exec_parser(demo_parser(), fp_desc("Demonstration"))
        self.assertEqual(cm.exception.code, 0)
        self.assertIn("usage: demo [result1 | result2 | result3]", stdout.getvalue())
        self.assertIn("Demonstration", stdout.getvalue())

    def test_error_exits_nonzero(self):
        stderr = io.StringIO()
        with redirect_stderr(stderr):
            with self.assertRaises(SystemExit) as cm:
                helper_exec_parser(demo_parser(), fp_desc("Demonstration"), args=["bogus"])
        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Demonstration", stderr.getvalue())
        self.assertIn("Invalid argument 'bogus'", stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
