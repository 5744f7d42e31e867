"""Read access to bank account records."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Protocol

from .errors import InputError


@dataclass(frozen=True)
class BankAccount:
    """Bank account owned by the issuing company."""

    id: int
    iban: str
    label: str = ""
    bic: str | None = None


class AccountStore(Protocol):
    """Lookup of bank accounts by identifier."""

    def fetch(self, account_id: int) -> BankAccount | None:
        """Return the account with ``account_id`` or ``None``."""


class InMemoryAccountStore:
    """Account store backed by a dictionary."""

    def __init__(self, accounts: Iterable[BankAccount] = ()) -> None:
        self._accounts = {account.id: account for account in accounts}

    def add(self, account: BankAccount) -> None:
        self._accounts[account.id] = account

    def fetch(self, account_id: int) -> BankAccount | None:
        return self._accounts.get(account_id)

    def __len__(self) -> int:
        return len(self._accounts)


def load_accounts(path: Path) -> InMemoryAccountStore:
    """Load bank accounts from a JSON list of ``{id, iban, label, bic}``."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InputError(f"'{path}' is not valid JSON") from exc

    if isinstance(payload, dict):
        payload = payload.get("accounts", [])

    store = InMemoryAccountStore()
    for item in payload:
        try:
            store.add(
                BankAccount(
                    id=int(item["id"]),
                    iban=str(item.get("iban", "")),
                    label=str(item.get("label", "")),
                    bic=item.get("bic"),
                )
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise InputError(f"Invalid bank account entry in '{path}': {item!r}") from exc
    return store


__all__ = ["AccountStore", "BankAccount", "InMemoryAccountStore", "load_accounts"]
