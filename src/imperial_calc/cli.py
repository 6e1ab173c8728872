import json
import logging
import sys
from typing import Iterable, List

import click

from .config import SessionConfig
from .session import CalculatorSession
from .tokens import BACKSPACE, CLEAR, EQUALS, OPERATORS, InputToken, Pad

_PAD_PREFIXES = {
    "f": Pad.FEET,
    "i": Pad.INCHES,
    "s": Pad.SCALAR,
}
_CONTROL_WORDS = {
    "bs": BACKSPACE,
    "backspace": BACKSPACE,
    "clear": CLEAR,
}


def parse_key(word: str) -> List[InputToken]:
    """Turn one word of a key script into key presses.

    ``f12`` -> Feet 1, Feet 2; ``i1/4`` -> Inches 1/4; ``s3.5`` -> Scalar 3, ., 5;
    ``+ - x / =`` -> operators; ``bs`` / ``clear`` -> controls.
    """
    lowered = word.lower()
    if word in OPERATORS or word == EQUALS:
        return [InputToken(Pad.OPERATOR, word)]
    if lowered in _CONTROL_WORDS:
        return [InputToken(Pad.CONTROL, _CONTROL_WORDS[lowered])]

    pad = _PAD_PREFIXES.get(lowered[:1])
    body = word[1:]
    if pad is None or not body:
        raise ValueError(f"Unrecognised key: {word!r}")
    if "/" in body:
        return [InputToken(pad, body)]
    return [InputToken(pad, ch) for ch in body]


def parse_keys(words: Iterable[str]) -> List[InputToken]:
    tokens: List[InputToken] = []
    for word in words:
        tokens.extend(parse_key(word))
    return tokens


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log every key press")
def main(verbose: bool) -> None:
    """Imperial feet/inches calculator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("keys", nargs=-1, required=True)
@click.option(
    "--denominator",
    type=click.Choice(["8", "16", "32"]),
    default="16",
    show_default=True,
    help="Inches-pad fraction denominator",
)
def run(keys: List[str], denominator: str) -> None:
    """Feed a key script through a session and print the final state as JSON."""
    try:
        tokens = parse_keys(keys)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="KEYS")

    session = CalculatorSession(
        SessionConfig(fraction_denominator=int(denominator), auto_recover=False)
    )
    for token in tokens:
        session.submit(token)

    click.echo(json.dumps(session.snapshot(), ensure_ascii=False))
    if session.error is not None:
        sys.exit(1)


@main.command()
@click.option("--host", default="0.0.0.0", show_default=True, help="Host to bind to")
@click.option("--port", default=5000, show_default=True, help="Port to bind to")
def serve(host: str, port: int) -> None:
    """Run the JSON API web server."""
    from .webapp.server import main as run_server

    run_server(host=host, port=port)


if __name__ == "__main__":  # pragma: no cover
    main()
