# Copyright (c) Rich Connexions Ltd. All rights reserved.
# Licensed under the MIT License. See LICENSE for details.
"""Account directory interface and a static, file-backed implementation.

The SIP stack that owns the real account list lives outside this package;
the resolver only needs the two lookups described by ``AccountDirectory``.
``StaticAccountDirectory`` serves the CLI and tests, loading accounts from
a JSON file of the form::

    {
      "default": "100",
      "accounts": [
        {"extension": "100", "server_domain": "pbx.example.com"}
      ]
    }
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, ValidationError

from nexus.connect.exceptions import ConfigurationError

log = logging.getLogger(__name__)


class AccountRef(Protocol):
    """A locally provisioned SIP account."""

    def server_domain(self) -> Optional[str]:
        """Domain of the account's registrar (the PBX)."""
        ...

    def extension_id(self) -> Optional[str]:
        """Username part of the account's identity address."""
        ...


class AccountDirectory(Protocol):
    """Lookup of locally provisioned accounts."""

    def find_account_by_extension(self, extension: str) -> Optional[AccountRef]:
        ...

    def default_account(self) -> Optional[AccountRef]:
        ...


@dataclass(frozen=True)
class StaticAccount:
    """Plain account record."""

    extension: Optional[str]
    domain: Optional[str]

    def server_domain(self) -> Optional[str]:
        return self.domain

    def extension_id(self) -> Optional[str]:
        return self.extension


class StaticAccountDirectory:
    """In-memory ``AccountDirectory`` over a fixed list of accounts.

    The default account is the one named by ``default_extension``, or the
    first account when no default is named.
    """

    def __init__(
        self,
        accounts: Sequence[StaticAccount] = (),
        default_extension: Optional[str] = None,
    ):
        self._accounts: List[StaticAccount] = list(accounts)
        self._default_extension = default_extension

    def find_account_by_extension(self, extension: str) -> Optional[StaticAccount]:
        for account in self._accounts:
            if account.extension_id() == extension:
                return account
        return None

    def default_account(self) -> Optional[StaticAccount]:
        if self._default_extension is not None:
            return self.find_account_by_extension(self._default_extension)
        return self._accounts[0] if self._accounts else None

    def __len__(self) -> int:
        return len(self._accounts)


# =============================================================================
# Accounts file
# =============================================================================


class AccountModel(BaseModel):
    extension: str
    server_domain: str


class AccountsFileModel(BaseModel):
    default: Optional[str] = None
    accounts: List[AccountModel] = []


def load_account_directory(path: Union[str, Path]) -> StaticAccountDirectory:
    """Load a ``StaticAccountDirectory`` from a JSON accounts file.

    Raises:
        ConfigurationError: If the file cannot be read or is malformed, or
            if ``default`` names an extension that is not in the file.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(f"Cannot read accounts file {path}: {e}") from e
    except ValueError as e:
        raise ConfigurationError(f"Accounts file {path} is not valid JSON: {e}") from e

    try:
        model = AccountsFileModel.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Accounts file {path} is malformed: {e}") from e

    accounts = [
        StaticAccount(extension=a.extension, domain=a.server_domain)
        for a in model.accounts
    ]
    if model.default is not None and model.default not in {a.extension for a in accounts}:
        raise ConfigurationError(
            f"Default extension {model.default} is not defined in {path}"
        )

    log.info("Loaded %d account(s) from %s", len(accounts), path)
    return StaticAccountDirectory(accounts, default_extension=model.default)
