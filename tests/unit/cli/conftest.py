"""Fixtures shared by the CLI tests."""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from alpi.core.ledger import LedgerCategory, StateLedger
from alpi.core.paths import get_ledger_path
from alpi.models.mode import ExecutionMode


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo the logging setup every CLI invocation performs."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def desktop_ledger(home: Path) -> StateLedger:
    """The desktop stack's ledger with one symlink and one package recorded."""
    target = home / "target.conf"
    target.write_text("")
    link = home / ".config" / "foot" / "foot.ini"
    link.parent.mkdir(parents=True)
    link.symlink_to(target)

    ledger = StateLedger(get_ledger_path("alpi-niri"))
    ledger.add(LedgerCategory.FILE, str(link), mode=ExecutionMode.APPLY)
    ledger.add(LedgerCategory.PACKAGE, "foot", mode=ExecutionMode.APPLY)
    return ledger
