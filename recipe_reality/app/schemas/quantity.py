from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class Quantity(BaseModel):
    """A parsed ingredient amount.

    ``text`` is the rendered amount (``"1 1/2"``) or, when nothing numeric
    could be read, the verbatim input. ``raw_text`` always holds the original
    string the quantity was parsed from.
    """

    amount: Optional[Decimal] = None
    unit: Optional[str] = None
    text: str = ""
    raw_text: str = ""

    model_config = ConfigDict(frozen=True)

    @field_validator("amount")
    @classmethod
    def validate_amount(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is not None and value < 0:
            raise ValueError("amount must be non-negative")
        return value
