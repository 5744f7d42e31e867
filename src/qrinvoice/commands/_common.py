"""Options and loaders shared by the command line tools."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..accounts import InMemoryAccountStore, load_accounts
from ..invoices import Party
from ..settings import InvoiceSettings, load_settings
from ..translation import Translator

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--settings",
        type=Path,
        default=None,
        help="JSON settings file (defaults to $QRINVOICE_SETTINGS_PATH)",
    )
    parser.add_argument("--accounts", type=Path, default=None, help="JSON list of bank accounts")
    parser.add_argument("--lang", default="en_US", help="Language of the documents, e.g. fr_CH")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Send the package logs to stderr."""

    logger = logging.getLogger("qrinvoice")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logging.captureWarnings(True)
    return logger


def load_context(
    args: argparse.Namespace,
) -> tuple[InvoiceSettings, InMemoryAccountStore, Translator]:
    settings = load_settings(args.settings)
    accounts = load_accounts(args.accounts) if args.accounts else InMemoryAccountStore()
    return settings, accounts, Translator(args.lang)


def issuer_of(settings: InvoiceSettings) -> Party:
    """Issuing company from the settings, empty when not configured."""

    return settings.issuer if settings.issuer is not None else Party(name="")
