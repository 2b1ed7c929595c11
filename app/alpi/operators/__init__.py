"""Package operators for alpi.

This module exports operator classes for the supported package managers.
"""

from alpi.operators.base import Operator, OperatorError, PackageTransaction, TransactionType
from alpi.operators.bootstrap import BootstrapResult, bootstrap_toolchain
from alpi.operators.pacman import PacmanOperator
from alpi.operators.yay import YayOperator

__all__ = [
    "BootstrapResult",
    "Operator",
    "OperatorError",
    "PackageTransaction",
    "PacmanOperator",
    "TransactionType",
    "YayOperator",
    "bootstrap_toolchain",
]
