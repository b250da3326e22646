import logging
from typing import Iterable, List

import click

from .commands import Command, CommandError, Operation, ToggleSign, command_from_key
from .config import configure_logging, load_settings
from .evaluator import Evaluator
from .state import Operator

logger = logging.getLogger(__name__)

# Tokens accepted on the command line in addition to keyboard keys
TOKEN_ALIASES = {
    "c": "Escape",
    "ac": "Escape",
    "clear": "Escape",
    "esc": "Escape",
    "bs": "Backspace",
    "back": "Backspace",
    "enter": "Enter",
}
TOKEN_COMMANDS = {
    "±": ToggleSign(),
    "neg": ToggleSign(),
    "×": Operation(Operator.MULTIPLY),
    "x": Operation(Operator.MULTIPLY),
    "÷": Operation(Operator.DIVIDE),
    "−": Operation(Operator.SUBTRACT),
}
QUIT_TOKENS = {"q", "quit", "exit"}


def command_from_token(token: str) -> Command:
    command = command_from_key(token)
    if command is not None:
        return command
    lowered = token.lower()
    if lowered in TOKEN_COMMANDS:
        return TOKEN_COMMANDS[lowered]
    if lowered in TOKEN_ALIASES:
        return command_from_key(TOKEN_ALIASES[lowered])
    raise CommandError(f"Unknown key: {token!r}")


def tokenize(line: str) -> List[str]:
    """Split a line into keys; runs like '12.5' become one key per character."""
    tokens: List[str] = []
    for word in line.split():
        if command_from_key(word) is None and all(command_from_key(ch) for ch in word):
            tokens.extend(word)
        else:
            tokens.append(word)
    return tokens


def feed(evaluator: Evaluator, tokens: Iterable[str]) -> None:
    """Apply all tokens, or none of them if any token is unknown."""
    commands = [command_from_token(token) for token in tokens]
    for command in commands:
        evaluator.dispatch(command)


def render(evaluator: Evaluator, show_expression: bool) -> str:
    if show_expression and evaluator.expression:
        return f"{evaluator.expression} | {evaluator.display}"
    return evaluator.display


@click.group()
@click.option("--log-level", default=None, help="Override KEYPAD_CALC_LOG_LEVEL")
@click.pass_context
def main(ctx: click.Context, log_level: str) -> None:
    """Keypad calculator with left-to-right evaluation."""
    try:
        settings = load_settings()
    except ValueError as e:
        raise click.UsageError(str(e)) from None
    if log_level:
        settings.log_level = log_level.upper()
        try:
            settings.validate()
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--log-level") from None
    configure_logging(settings.log_level)
    ctx.obj = settings


@main.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--show-expression", is_flag=True, default=False, help="Also print the pending expression")
def press(keys: List[str], show_expression: bool) -> None:
    """Press KEYS from a fresh calculator and print the display."""
    evaluator = Evaluator()
    try:
        feed(evaluator, tokenize(" ".join(keys)))
    except CommandError as e:
        raise click.BadParameter(str(e), param_hint="KEYS") from None
    click.echo(render(evaluator, show_expression))


@main.command()
@click.option("--show-expression/--no-show-expression", default=True, show_default=True)
def repl(show_expression: bool) -> None:
    """Read keys from stdin, one line at a time."""
    evaluator = Evaluator()
    stdin = click.get_text_stream("stdin")
    for line in stdin:
        if line.strip().lower() in QUIT_TOKENS:
            break
        try:
            feed(evaluator, tokenize(line))
        except CommandError as e:
            click.echo(f"error: {e}", err=True)
            continue
        click.echo(render(evaluator, show_expression))


@main.command()
@click.option("--host", default=None, help="Host to bind to (default: KEYPAD_CALC_HOST)")
@click.option("--port", type=int, default=None, help="Port to bind to (default: KEYPAD_CALC_PORT)")
@click.option("--debug", is_flag=True, default=False, help="Enable the Flask debugger")
@click.pass_obj
def serve(settings, host: str, port: int, debug: bool) -> None:
    """Run the keypad web server."""
    from .webapp import app
    from .webapp import sessions

    host = host or settings.host
    port = port or settings.port
    debug = debug or settings.debug

    sessions.configure(settings.max_sessions)
    logger.info("Starting keypad-calc web server on %s:%s", host, port)
    click.echo(f"Access at: http://{host}:{port}")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    main()
