"""
Settlement service: net balances and transfer schedules from a debt matrix.
"""
import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from activitybook.core.config import settings
from activitybook.core.exceptions import SettlementOverflow

logger = logging.getLogger(__name__)

Matrix = List[List[float]]


class Transfer:
    """Represents a single transfer between participants."""
    def __init__(self, from_participant_id: int, to_participant_id: int, amount: float):
        self.from_participant_id = from_participant_id
        self.to_participant_id = to_participant_id
        self.amount = amount

    def __eq__(self, other):
        if not isinstance(other, Transfer):
            return NotImplemented
        return (
            self.from_participant_id == other.from_participant_id
            and self.to_participant_id == other.to_participant_id
            and self.amount == other.amount
        )

    def __repr__(self):
        return (
            f"Transfer({self.from_participant_id} -> {self.to_participant_id}: "
            f"{self.amount})"
        )


class Settlement:
    """Outcome of one solver run, indexed by participant position."""
    def __init__(self, transfers: Matrix, balances: List[float],
                 steps: List[Tuple[int, int, float]]):
        self.transfers = transfers
        self.balances = balances
        # (payer index, payee index, amount) in the order they were recorded
        self.steps = steps


def compute_net_balances(debt: Sequence[Sequence[float]]) -> List[float]:
    """
    Net position of every participant.

    Positive means the participant owes the group, negative means the group
    owes them.
    """
    n = len(debt)
    return [
        sum(debt[a][b] for b in range(n)) - sum(debt[b][a] for b in range(n))
        for a in range(n)
    ]


def settlement_epsilon(debt: Sequence[Sequence[float]], tolerance: Optional[float] = None) -> float:
    """Absolute tolerance below which a balance counts as settled."""
    if tolerance is None:
        tolerance = settings.SETTLEMENT_TOLERANCE
    total = sum(sum(row) for row in debt)
    return tolerance * max(1.0, total)


def settle_debts(debt: Sequence[Sequence[float]], tolerance: Optional[float] = None) -> Settlement:
    """
    Collapse pairwise debts into a transfer schedule.

    Greedy two-pointer pass over the balances in participant order: the
    first remaining debtor pays the first remaining creditor the smaller of
    the two outstanding amounts. Every step zeroes at least one side, so at
    most n - 1 transfers are recorded.

    transfers[i][j] < 0 means i pays j; the matrix is skew-symmetric.
    Raises SettlementOverflow when the debts are not finite.
    """
    n = len(debt)
    epsilon = settlement_epsilon(debt, tolerance)
    net = compute_net_balances(debt)
    if not math.isfinite(epsilon) or not all(math.isfinite(b) for b in net):
        raise SettlementOverflow()
    balances = [_snap(b, epsilon) for b in net]
    transfers = [[0.0] * n for _ in range(n)]
    steps = []

    i = 0
    j = 0
    while i != n and j != n:
        if not balances[i] > 0:
            i += 1
            continue
        if not balances[j] < 0:
            j += 1
            continue

        m = min(balances[i], -balances[j])
        # i gives j m
        transfers[i][j] -= m
        transfers[j][i] += m
        balances[i] = _snap(balances[i] - m, epsilon)
        balances[j] = _snap(balances[j] + m, epsilon)
        steps.append((i, j, m))

    logger.debug(f"Transfer matrix: {transfers}")
    return Settlement(transfers, balances, steps)


def _snap(value: float, epsilon: float) -> float:
    return 0.0 if abs(value) <= epsilon else value


def build_settlement_summary(activity) -> Dict:
    """
    Calculation data and a printable summary for an activity's settlement.
    """
    net_balances = activity.net_balances()
    transfers = activity.transfers()

    calculation_data = {
        "net_balances": net_balances,
        "transfers": [
            {
                "from_participant_id": t.from_participant_id,
                "to_participant_id": t.to_participant_id,
                "amount": t.amount,
            }
            for t in transfers
        ],
        "transfer_matrix": activity.transfer_matrix(),
        "total_spent": activity.total_spent(),
        "participant_count": len(activity.participants()),
    }

    summary_lines = []
    summary_lines.append(f"Activity: {activity.title}")
    summary_lines.append(f"Total spent (excluding deleted): {calculation_data['total_spent']:.2f}")
    summary_lines.append(f"Participants: {calculation_data['participant_count']}")
    summary_lines.append("\nNet balances:")
    for participant_id, balance in net_balances.items():
        summary_lines.append(f"  {participant_id}: {balance:+.2f}")
    summary_lines.append("\nTransfers:")
    for transfer in calculation_data["transfers"]:
        summary_lines.append(
            f"  {transfer['from_participant_id']} -> {transfer['to_participant_id']}: "
            f"{transfer['amount']:.2f}"
        )
    calculation_data["summary"] = "\n".join(summary_lines)

    return calculation_data
