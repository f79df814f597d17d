from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_HALF_UP, Context, Decimal
from enum import Enum
from typing import ClassVar, Union

# Unbounded precision: additions and subtractions of money are always exact.
MONEY_CONTEXT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN, rounding=ROUND_HALF_UP)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class DisputeState(Enum):
    UNDISPUTED = "undisputed"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGED_BACK = "charged_back"


class ApplyOutcome(Enum):
    APPLIED = "applied"
    IGNORED = "ignored"


@dataclass(frozen=True)
class Deposit:
    transaction_type: ClassVar[TransactionType] = TransactionType.DEPOSIT

    client_id: int
    tx_id: int
    amount: Decimal


@dataclass(frozen=True)
class Withdrawal:
    transaction_type: ClassVar[TransactionType] = TransactionType.WITHDRAWAL

    client_id: int
    tx_id: int
    amount: Decimal


@dataclass(frozen=True)
class Dispute:
    transaction_type: ClassVar[TransactionType] = TransactionType.DISPUTE

    client_id: int
    tx_id: int


@dataclass(frozen=True)
class Resolve:
    transaction_type: ClassVar[TransactionType] = TransactionType.RESOLVE

    client_id: int
    tx_id: int


@dataclass(frozen=True)
class Chargeback:
    transaction_type: ClassVar[TransactionType] = TransactionType.CHARGEBACK

    client_id: int
    tx_id: int


TransactionRecord = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


@dataclass
class HistoryEntry:
    """A stored deposit, the only kind of transaction that can be disputed."""

    tx_id: int
    client_id: int
    amount: Decimal
    dispute_state: DisputeState = DisputeState.UNDISPUTED

    def __repr__(self) -> str:
        return f"HistoryEntry(tx={self.tx_id}, client={self.client_id}, amount={self.amount}, state={self.dispute_state.value})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return MONEY_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = MONEY_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = MONEY_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.available = MONEY_CONTEXT.subtract(self.available, amount)
        self.held = MONEY_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.held = MONEY_CONTEXT.subtract(self.held, amount)
        self.available = MONEY_CONTEXT.add(self.available, amount)

    def remove_held(self, amount: Decimal) -> None:
        self.held = MONEY_CONTEXT.subtract(self.held, amount)

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for applied and ignored records over one run."""

    def __init__(self):
        self.applied = 0
        self.ignored = 0

    def record(self, outcome: ApplyOutcome) -> None:
        if outcome == ApplyOutcome.APPLIED:
            self.applied += 1
        else:
            self.ignored += 1

    @property
    def total(self) -> int:
        return self.applied + self.ignored
