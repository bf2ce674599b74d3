"""
Activity aggregate: participant roster, expense log and debt tracking.
"""
import enum
import logging
from typing import Dict, List, Optional, Tuple

from activitybook.core.exceptions import PayerNotParticipant, SettlementOverflow
from activitybook.core.keys import PrimaryKeyAllocator
from activitybook.services.settlement_service import Settlement, Transfer, compute_net_balances, settle_debts

logger = logging.getLogger(__name__)


class ActivityStatus(str, enum.Enum):
    """Activity status enumeration."""
    EMPTY = "Empty"
    POPULATED = "Populated"
    SETTLED = "Settled"


class Expense:
    """
    A payment by one participant on behalf of every current participant.

    Only the deleted flag is mutable. Two expenses are equal when payer and
    amount match; the flag is not part of identity.
    """

    def __init__(self, payer: int, amount: float):
        self.payer = payer
        self.amount = float(amount)
        self.deleted = False

    def delete(self) -> None:
        """Mark the expense as deleted."""
        self.deleted = True

    def __eq__(self, other):
        if other is self:
            return True
        if not isinstance(other, Expense):
            return NotImplemented
        return self.payer == other.payer and self.amount == other.amount

    def __hash__(self):
        return hash((self.payer, self.amount))

    def __repr__(self):
        flag = ", deleted" if self.deleted else ""
        return f"Expense(payer={self.payer}, amount={self.amount}{flag})"


class Activity:
    """
    A shared event whose expenses are split equally between participants.

    Participant ids are opaque integers. Their insertion order is the index
    used by the debt and transfer matrices: debt[j][i] is what participant j
    owes participant i for expenses i paid, and after settlement
    transfers[i][j] < 0 means i pays j.
    """

    def __init__(
        self,
        title: str,
        *participant_ids: int,
        primary_key: Optional[int] = None,
        allocator: Optional[PrimaryKeyAllocator] = None,
    ):
        if not title:
            raise ValueError("Activity title must be a non-empty string")
        if primary_key is None:
            if allocator is None:
                raise ValueError("Either primary_key or allocator is required")
            primary_key = allocator.allocate()

        self.primary_key = primary_key
        self.title = title
        self._participants: List[int] = []
        self._joined_after: List[int] = []
        self._expenses: List[Expense] = []
        self._balances: List[float] = []
        self._debt: List[List[float]] = []
        self._transfers: List[List[float]] = []
        self._settlement: Optional[Settlement] = None
        self.status = ActivityStatus.EMPTY

        self.invite(*participant_ids)

    # Queries

    def participants(self) -> Tuple[int, ...]:
        return tuple(self._participants)

    def expenses(self) -> Tuple[Expense, ...]:
        return tuple(self._expenses)

    def has_participant(self, participant_id: int) -> bool:
        return participant_id in self._participants

    def joined_after(self, participant_id: int) -> int:
        """Number of expenses already recorded when the participant joined."""
        return self._joined_after[self._participants.index(participant_id)]

    def debt_matrix(self) -> List[List[float]]:
        return [list(row) for row in self._debt]

    def balances(self) -> List[float]:
        """Balances left by the last settlement run."""
        return list(self._balances)

    def net_balances(self) -> Dict[int, float]:
        """Net balance per participant id, derived from the current debt."""
        return dict(zip(self._participants, compute_net_balances(self._debt)))

    def total_spent(self) -> float:
        """Sum of expenses that have not been deleted."""
        return sum(e.amount for e in self._expenses if not e.deleted)

    def transfer_matrix(self) -> List[List[float]]:
        """
        Settle the activity and return a copy of the transfer matrix.

        Entry [i][j] is what i receives from j; negative means i gives j
        money. The result is cached until the next mutation.
        """
        self._settle()
        return [list(row) for row in self._transfers]

    def transfers(self) -> List[Transfer]:
        """The settlement as payer -> payee transfers, in solver order."""
        self._settle()
        if self._settlement is None:
            return []
        return [
            Transfer(self._participants[i], self._participants[j], amount)
            for i, j, amount in self._settlement.steps
        ]

    # Mutators

    def invite(self, *participant_ids: int) -> List[int]:
        """
        Add participants to the activity.

        Ids already present, or repeated in the call, are skipped. Newcomers
        start with a zero row and column and do not share earlier expenses.
        Returns the ids that were added.
        """
        added = []
        for participant_id in participant_ids:
            if participant_id in self._participants:
                continue
            self._participants.append(participant_id)
            self._joined_after.append(len(self._expenses))
            self._balances.append(0.0)  # newcomers don't owe
            for matrix in (self._debt, self._transfers):
                for row in matrix:
                    row.append(0.0)
                matrix.append([0.0] * len(self._participants))
            added.append(participant_id)

        if added:
            logger.debug(f"Activity {self.primary_key}: invited {added}")
            self._invalidate()
        return added

    def add_expense(self, *expenses: Expense) -> None:
        """
        Record expenses and split each one over the current participants.

        Raises PayerNotParticipant, without recording anything, if any payer
        is not in the activity.
        """
        missing = [e.payer for e in expenses if e.payer not in self._participants]
        if missing:
            logger.warning(
                f"Activity {self.primary_key}: rejected {len(expenses)} expense(s), "
                f"payers {missing} not participating"
            )
            raise PayerNotParticipant(missing, self.primary_key)

        for expense in expenses:
            # Own copy so soft-delete flags are per position
            self._expenses.append(Expense(expense.payer, expense.amount))

            payer = self._participants.index(expense.payer)
            share = expense.amount / len(self._participants)
            for j, row in enumerate(self._debt):
                if j != payer:
                    row[payer] += share
            logger.debug(
                f"Activity {self.primary_key}: {expense.payer} paid {expense.amount}, "
                f"share {share}"
            )

        if expenses:
            self._invalidate()

    def delete_expense(self, *positions: int) -> List[int]:
        """
        Soft-delete expenses by 1-based position.

        Positions outside the log are ignored. The debt matrix keeps the
        deleted expenses' contribution. Returns the positions flagged.
        """
        flagged = []
        for position in positions:
            if 0 < position <= len(self._expenses):
                self._expenses[position - 1].delete()
                flagged.append(position)

        if flagged:
            self._invalidate()
        return flagged

    # Internals

    def _invalidate(self) -> None:
        self._settlement = None
        self.status = ActivityStatus.POPULATED

    def _settle(self) -> None:
        if self.status != ActivityStatus.POPULATED:
            return
        try:
            settlement = settle_debts(self._debt)
        except SettlementOverflow:
            logger.warning(f"Activity {self.primary_key}: debts overflow, not settled")
            raise SettlementOverflow(self.primary_key) from None
        self._transfers = settlement.transfers
        self._balances = settlement.balances
        self._settlement = settlement
        self.status = ActivityStatus.SETTLED

    def __repr__(self):
        return f"Activity({self.primary_key}, {self.title!r})"

    def __eq__(self, other):
        if other is self:
            return True
        if not isinstance(other, Activity):
            return NotImplemented
        return (
            self.title == other.title
            and self._participants == other._participants
            and self._expenses == other._expenses
        )
