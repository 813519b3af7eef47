"""
Recurrence calculator for maintenance schedules.

Used both when a schedule is created (to seed ``next_due_date``) and by
the automation run (to advance it).  Month arithmetic goes through
``dateutil.relativedelta``, which clamps to the last valid day of the
target month: 2024-01-31 plus one month is 2024-02-29.
"""

from datetime import date

from dateutil.relativedelta import relativedelta

from facilitydesk.exceptions import UnsupportedFrequencyError
from facilitydesk.models.enums import FrequencyType

# Step size for one unit of ``frequency_value``.
_STEPS: dict[FrequencyType, relativedelta] = {
    FrequencyType.DAILY: relativedelta(days=1),
    FrequencyType.WEEKLY: relativedelta(weeks=1),
    FrequencyType.MONTHLY: relativedelta(months=1),
    FrequencyType.QUARTERLY: relativedelta(months=3),
    FrequencyType.SEMI_ANNUAL: relativedelta(months=6),
    FrequencyType.ANNUAL: relativedelta(years=1),
}


def calculate_next_due_date(
    frequency_type: FrequencyType | str,
    frequency_value: int,
    start_date: date,
) -> date:
    """
    Return ``start_date`` advanced by ``frequency_value`` periods.

    The step is multiplied before it is applied, so three months from
    Jan 31 lands on Apr 30 rather than drifting through Feb 28.

    Raises:
        UnsupportedFrequencyError: For ``custom`` (or unknown) frequencies.
        ValueError: If ``frequency_value`` is not a positive integer.
    """
    try:
        frequency = FrequencyType(frequency_type)
    except ValueError as exc:
        raise UnsupportedFrequencyError(
            f"Unknown frequency type '{frequency_type}'."
        ) from exc

    step = _STEPS.get(frequency)
    if step is None:
        raise UnsupportedFrequencyError(
            f"Frequency '{frequency.value}' has no automatic recurrence; "
            "set next_due_date explicitly."
        )
    if isinstance(frequency_value, bool) or not isinstance(frequency_value, int):
        raise ValueError("frequency_value must be an integer.")
    if frequency_value < 1:
        raise ValueError("frequency_value must be a positive integer.")

    return start_date + step * frequency_value
