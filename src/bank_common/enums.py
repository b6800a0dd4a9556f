"""Global enums. Must match DB CHECK constraints exactly.

Stored values keep the Portuguese names used by the existing clients
(CORRENTE / POUPANCA); member names are the English equivalents.
"""

from enum import Enum


class BankAccountType(str, Enum):
    CHECKING = "CORRENTE"
    SAVINGS = "POUPANCA"


class TransactionType(str, Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"
