"""
Admission Validator - the daily-hours rule as a pure function of its inputs.

No I/O happens here: the caller supplies the hours already booked on the
candidate's date and gets back a decision.
"""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict

from timeledger.domain.errors import CapExceededError, InvalidInputError, LedgerError
from timeledger.domain.models import DAILY_HOURS_CAP
from timeledger.utils import normalize_date, to_hours


class AdmissionDecision(BaseModel):
    """Admit, or reject with a reason that carries every number involved"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    admitted: bool
    day: datetime.date
    existing_hours: Decimal
    hours: Decimal
    total_hours: Decimal
    error: Optional[LedgerError] = None

    @property
    def reason(self) -> str:
        return self.error.message if self.error else ""

    def raise_for_rejection(self) -> None:
        """Raise the rejection error, if any"""
        if self.error is not None:
            raise self.error


class AdmissionValidator:
    """
    Checks that a candidate entry fits into its day's remaining budget.
    """

    def __init__(self, cap: Decimal = DAILY_HOURS_CAP):
        self.cap = cap

    def validate(self, candidate, existing_hours: Decimal) -> AdmissionDecision:
        """
        Decide whether a candidate entry can be admitted.

        Args:
            candidate: Anything with `date` and `hours` (usually a TimeEntryRequest)
            existing_hours: Hours already booked on the candidate's date,
                excluding the entry being replaced on updates

        Returns:
            The decision; rejected decisions carry a CapExceededError or an
            InvalidInputError
        """
        day = normalize_date(candidate.date)
        hours = candidate.hours
        if not isinstance(hours, Decimal):
            hours = Decimal(str(hours))
        existing = to_hours(existing_hours)
        total = existing + hours

        error = None
        if hours <= 0:
            error = InvalidInputError(f"Hours must be greater than 0, got {hours}", field="hours")
        elif total > self.cap:
            error = CapExceededError(day, existing, hours, total, self.cap)

        return AdmissionDecision(
            admitted=error is None,
            day=day,
            existing_hours=existing,
            hours=hours,
            total_hours=total,
            error=error
        )
