"""Command line entry points for qrinvoice."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from . import __version__
from .commands import check_qr, numbering, render

CommandCallable = Callable[[list[str] | None], int | None]


@dataclass(frozen=True)
class CommandSpec:
    """Metadata describing a CLI command exposed by :mod:`qrinvoice.cli`."""

    name: str
    summary: str
    handler: CommandCallable
    module: str

    def run(self, argv: list[str] | None) -> int:
        """Execute the command and normalise the resulting exit code."""

        try:
            result = self.handler(argv)
        except SystemExit as exc:  # argparse exits on usage errors
            code = exc.code
            if code is None:
                return 0
            if isinstance(code, int):
                return code
            print(str(code), file=sys.stderr)
            return 1
        if result is None:
            return 0
        return int(result)


_COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec(
        name="render",
        summary="Generate invoice PDFs with the Swiss QR-bill payment part.",
        handler=render.main,
        module="qrinvoice.commands.render",
    ),
    CommandSpec(
        name="check-qr",
        summary="Check the Swiss QR-bill data of invoices, optionally to Excel.",
        handler=check_qr.main,
        module="qrinvoice.commands.check_qr",
    ),
    CommandSpec(
        name="numbering",
        summary="Describe a numbering module and compute the next or last reference.",
        handler=numbering.main,
        module="qrinvoice.commands.numbering",
    ),
)

_COMMAND_INDEX: Mapping[str, CommandSpec] = {spec.name: spec for spec in _COMMANDS}


def available_commands() -> Iterable[CommandSpec]:
    """Return the commands registered in the CLI."""

    return _COMMANDS


def build_parser() -> argparse.ArgumentParser:
    """Return the base argument parser shared across commands."""

    parser = argparse.ArgumentParser(prog="qrinvoice", description="Invoice documents with Swiss QR-bills")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="command")
    subparsers.required = True

    for spec in _COMMANDS:
        subparser = subparsers.add_parser(
            spec.name,
            help=spec.summary,
            description=spec.summary,
            add_help=False,
        )
        subparser.add_argument("args", nargs=argparse.REMAINDER, help=argparse.SUPPRESS)

    return parser


def run(command: str, argv: Sequence[str] | None = None) -> int:
    """Execute *command* forwarding ``argv`` to the underlying handler."""

    spec = _COMMAND_INDEX.get(command)
    if spec is None:
        raise ValueError(f"Unknown command: {command}")
    return spec.run(list(argv or []))


def main(argv: Sequence[str] | None = None) -> int:
    """Execute the command line interface."""

    arguments = list(sys.argv[1:] if argv is None else argv)
    if arguments and arguments[0] in _COMMAND_INDEX:
        return run(arguments[0], arguments[1:])

    # No command given: let argparse print the help, the version or the usage error.
    build_parser().parse_args(arguments)
    return 2


if __name__ == "__main__":  # pragma: no cover - direct execution
    raise SystemExit(main())
