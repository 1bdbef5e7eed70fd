from applicative_helper.commands import CommandFields, command, subparser
from applicative_helper.errors import ArgumentError
from applicative_helper.execution import (
    Failure,
    Success,
    custom_exec_parser,
    exec_parser,
    exec_parser_pure,
    handle_parse_result,
)
from applicative_helper.helper import (
    altconcat,
    fp_desc,
    helper_exec_parser,
    helper_prefs,
    helper_prefs_mod,
    info_helper,
    subconcat,
)
from applicative_helper.info import ParserInfo, info
from applicative_helper.modifiers import (
    InfoMod,
    ParserPrefs,
    PrefsMod,
    brief_desc,
    disambiguate,
    failure_code,
    footer,
    full_desc,
    header,
    prefs,
    prog_desc,
    show_help_on_empty,
    show_help_on_error,
)
from applicative_helper.parsers import (
    Parser,
    argument,
    done,
    flag,
    helper,
    item,
    lift,
    matches,
    option,
    version_option,
)
from applicative_helper.result import Result

__all__ = [
    "Parser",
    "argument",
    "done",
    "flag",
    "helper",
    "item",
    "lift",
    "matches",
    "option",
    "version_option",
    "ParserInfo",
    "info",
    "InfoMod",
    "PrefsMod",
    "ParserPrefs",
    "brief_desc",
    "disambiguate",
    "failure_code",
    "footer",
    "full_desc",
    "header",
    "prefs",
    "prog_desc",
    "show_help_on_empty",
    "show_help_on_error",
    "CommandFields",
    "command",
    "subparser",
    "Success",
    "Failure",
    "exec_parser",
    "exec_parser_pure",
    "custom_exec_parser",
    "handle_parse_result",
    "altconcat",
    "fp_desc",
    "helper_exec_parser",
    "helper_prefs",
    "helper_prefs_mod",
    "info_helper",
    "subconcat",
    "ArgumentError",
    "Result",
]
