"""Command line option grammar.

Short options may be bundled (``-de``); a bundle ends at the first option
that takes a value, whose value is either the rest of the token (``-I@@``)
or the next token (``-I @@``). Long options match exactly or by an
unambiguous prefix. ``--`` and the first bare argument both end option
processing; every later token is positional.
"""

from __future__ import annotations

import logging as py_logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from panefan.errors import InvalidOption
from panefan.tmux.layouts import LayoutName, normalize_layout

logger = py_logging.getLogger(__name__)

AS_IS_TEMPLATE = "{}"
SSH_TEMPLATE = "ssh -o StrictHostKeyChecking=no {}"
SSH_TOKEN = "{}"


class OptionKind(str, Enum):
    FLAG = "flag"
    VALUED = "valued"


class LongValue(str, Enum):
    NONE = "none"
    OPTIONAL = "optional"
    REQUIRED = "required"


class Action(str, Enum):
    RUN = "run"
    HELP = "help"
    VERSION = "version"


SHORT_OPTIONS: dict[str, OptionKind] = {
    "h": OptionKind.FLAG,
    "V": OptionKind.FLAG,
    "d": OptionKind.FLAG,
    "e": OptionKind.FLAG,
    "I": OptionKind.VALUED,
    "l": OptionKind.VALUED,
    "c": OptionKind.VALUED,
    "n": OptionKind.VALUED,
    "S": OptionKind.VALUED,
}

LONG_OPTIONS: dict[str, LongValue] = {
    "help": LongValue.NONE,
    "version": LongValue.NONE,
    "desync": LongValue.NONE,
    "log": LongValue.OPTIONAL,
    "log-format": LongValue.REQUIRED,
    "ssh": LongValue.NONE,
    "dry-run": LongValue.NONE,
    "stay": LongValue.NONE,
    "debug": LongValue.NONE,
}


class ParsedConfig(BaseModel):
    """Options as parsed from argv; read-only once returned."""

    model_config = ConfigDict(frozen=True)

    action: Action = Action.RUN
    sync: bool = True
    dry_run: bool = False
    attach: bool = True
    debug: bool = False
    log_enabled: bool = False
    log_dir: Path | None = None
    log_format: str | None = None
    replacement_token: str | None = None
    command_template: str | None = None
    template_from_option: bool = False
    socket_path: str | None = None
    layout: LayoutName | None = None
    max_pane_args: int | None = None
    literal_mode: bool = False
    positional: tuple[str, ...] = ()


@dataclass
class OptionsBuilder:
    action: Action = Action.RUN
    sync: bool = True
    dry_run: bool = False
    attach: bool = True
    debug: bool = False
    log_enabled: bool = False
    log_dir: Path | None = None
    log_format: str | None = None
    replacement_token: str | None = None
    command_template: str | None = None
    template_from_option: bool = False
    as_is: bool = False
    socket_path: str | None = None
    layout: LayoutName | None = None
    max_pane_args: int | None = None
    literal_mode: bool = False
    positional: list[str] = field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.action is not Action.RUN

    def request(self, action: Action) -> None:
        if self.action is Action.RUN:
            self.action = action

    def use_template(self, template: str, token: str | None = None) -> None:
        self.command_template = template
        self.template_from_option = True
        self.as_is = False
        if token is not None:
            self.replacement_token = token

    def execute_as_is(self) -> None:
        # The template is whatever token is in effect once parsing ends.
        self.use_template(AS_IS_TEMPLATE)
        self.as_is = True

    def freeze(self) -> ParsedConfig:
        template = self.command_template
        if self.as_is:
            template = self.replacement_token or AS_IS_TEMPLATE
        return ParsedConfig(
            action=self.action,
            sync=self.sync,
            dry_run=self.dry_run,
            attach=self.attach,
            debug=self.debug,
            log_enabled=self.log_enabled,
            log_dir=self.log_dir,
            log_format=self.log_format,
            replacement_token=self.replacement_token,
            command_template=template,
            template_from_option=self.template_from_option,
            socket_path=self.socket_path,
            layout=self.layout,
            max_pane_args=self.max_pane_args,
            literal_mode=self.literal_mode,
            positional=tuple(self.positional),
        )


class _LexState(Enum):
    FLAGS = auto()
    VALUE_OPTION = auto()
    INLINE_VALUE = auto()


@dataclass(frozen=True)
class ShortToken:
    options: tuple[tuple[str, str | None], ...]
    consumed_next: bool = False


def lex_short_token(token: str, next_token: str | None = None) -> ShortToken:
    """Split one ``-xyz`` token into ``(option, value)`` pairs.

    ``next_token`` is the following argv entry, consumed as the value when
    the bundle ends in a valued option with nothing after it.
    """
    body = token[1:]
    options: list[tuple[str, str | None]] = []
    state = _LexState.FLAGS
    pending = ""

    for position, char in enumerate(body):
        if state is not _LexState.FLAGS:
            break
        kind = SHORT_OPTIONS.get(char)
        if kind is None:
            raise InvalidOption(f"invalid option -- '{char}'")
        if kind is OptionKind.FLAG:
            options.append((char, None))
            continue
        pending = char
        state = _LexState.VALUE_OPTION
        remainder = body[position + 1 :]
        if remainder:
            state = _LexState.INLINE_VALUE
            options.append((pending, remainder))

    if state is _LexState.VALUE_OPTION:
        if next_token is None or next_token.startswith("-"):
            raise InvalidOption(f"option requires an argument -- '{pending}'")
        options.append((pending, next_token))
        return ShortToken(options=tuple(options), consumed_next=True)
    return ShortToken(options=tuple(options))


def resolve_long_option(name: str) -> str:
    if name in LONG_OPTIONS:
        return name
    candidates = [option for option in LONG_OPTIONS if option.startswith(name)]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise InvalidOption(f"unrecognized option '--{name}'")
    listed = ", ".join(f"'--{option}'" for option in candidates)
    raise InvalidOption(f"option '--{name}' is ambiguous; possibilities: {listed}")


def _parse_pane_args(value: str) -> int:
    try:
        count = int(value)
    except ValueError as exc:
        raise InvalidOption(f"invalid argument '{value}' for option -- 'n'") from exc
    if count < 1:
        raise InvalidOption(f"invalid argument '{value}' for option -- 'n'")
    return count


def _apply_short(builder: OptionsBuilder, option: str, value: str | None) -> None:
    if option == "h":
        builder.request(Action.HELP)
    elif option == "V":
        builder.request(Action.VERSION)
    elif option == "d":
        builder.sync = False
    elif option == "e":
        builder.execute_as_is()
    elif option == "I":
        builder.replacement_token = value
    elif option == "l":
        builder.layout = normalize_layout(value or "")
    elif option == "c":
        builder.use_template(value or "")
    elif option == "n":
        builder.max_pane_args = _parse_pane_args(value or "")
    elif option == "S":
        builder.socket_path = value


def _apply_long(builder: OptionsBuilder, token: str) -> None:
    raw_name, has_value, value = token[2:].partition("=")
    name = resolve_long_option(raw_name)
    takes = LONG_OPTIONS[name]
    if has_value and takes is LongValue.NONE:
        raise InvalidOption(f"option '--{name}' doesn't allow an argument")
    if takes is LongValue.REQUIRED and not value:
        raise InvalidOption(f"option '--{name}' requires an argument")

    if name == "help":
        builder.request(Action.HELP)
    elif name == "version":
        builder.request(Action.VERSION)
    elif name == "desync":
        builder.sync = False
    elif name == "log":
        builder.log_enabled = True
        if value:
            builder.log_dir = Path(value).expanduser()
    elif name == "log-format":
        builder.log_enabled = True
        builder.log_format = value
    elif name == "ssh":
        builder.use_template(SSH_TEMPLATE, SSH_TOKEN)
    elif name == "dry-run":
        builder.dry_run = True
    elif name == "stay":
        builder.attach = False
    elif name == "debug":
        builder.debug = True


def parse_argv(argv: Sequence[str]) -> ParsedConfig:
    builder = OptionsBuilder()
    tokens = list(argv)
    index = 0
    no_more_options = False

    while index < len(tokens) and not builder.finished:
        token = tokens[index]
        index += 1
        if no_more_options:
            builder.positional.append(token)
        elif token == "--":
            no_more_options = True
            builder.literal_mode = True
        elif token.startswith("--"):
            _apply_long(builder, token)
        elif token.startswith("-") and token != "-":
            next_token = tokens[index] if index < len(tokens) else None
            lexed = lex_short_token(token, next_token)
            if lexed.consumed_next:
                index += 1
            for option, value in lexed.options:
                _apply_short(builder, option, value)
                if builder.finished:
                    break
        else:
            builder.positional.append(token)
            no_more_options = True

    config = builder.freeze()
    logger.debug(
        "Parsed options action=%s positional=%s template=%r token=%r max_pane_args=%s",
        config.action.value,
        len(config.positional),
        config.command_template,
        config.replacement_token,
        config.max_pane_args,
    )
    return config
