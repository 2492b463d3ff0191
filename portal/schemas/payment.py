from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any
from portal.core.ids import generate_id

# Methods with their own success rate; anything else (e.g. "wallet") takes the catch-all rate.
class PaymentMethod(str, Enum):
    BANK = "bank"
    MOMO = "momo"

SUCCESS_MESSAGE = "Payment processed (mock)"
FAILURE_MESSAGE = "Mock gateway failed"

class PaymentRequest(BaseModel):
    # No validation of account format, amount sign or reference; values pass through as given.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    method: str = PaymentMethod.BANK.value
    account: Any = None
    amount: Any = None
    reference: Any = None

class PaymentRecord(PaymentRequest):
    """Caller-side payments log entry."""
    id: str = Field(default_factory=lambda: generate_id("pay"))

class PaymentOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    provider: str
    account: Any = None
    amount: Any = None
    reference: Any = None
    tx_id: str
    time: str
    message: str
