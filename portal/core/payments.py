from datetime import datetime, timezone
from typing import Awaitable, Callable, Dict, Optional
import asyncio
import logging
import random

from portal.core.config import Settings, settings
from portal.core.ids import generate_id
from portal.schemas.payment import (
    FAILURE_MESSAGE,
    SUCCESS_MESSAGE,
    PaymentMethod,
    PaymentOutcome,
    PaymentRequest,
)

logger = logging.getLogger(__name__)

# MOCK GATEWAY – no network I/O, no real settlement.
# A call always resolves; failure is carried in `success`, never raised.

def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")

class PaymentSimulator:
    def __init__(
        self,
        min_delay_ms: int = 800,
        max_delay_ms: int = 1800,
        success_rates: Optional[Dict[str, float]] = None,
        default_rate: float = 0.99,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self.success_rates = success_rates if success_rates is not None else {
            PaymentMethod.BANK.value: 0.90,
            PaymentMethod.MOMO.value: 0.92,
        }
        self.default_rate = default_rate
        self.rng = rng or random.Random()
        self.sleep = sleep

    @classmethod
    def from_settings(cls, config: Settings, **kwargs) -> "PaymentSimulator":
        return cls(
            min_delay_ms=config.PAYMENT_MIN_DELAY_MS,
            max_delay_ms=config.PAYMENT_MAX_DELAY_MS,
            success_rates={
                PaymentMethod.BANK.value: config.BANK_SUCCESS_RATE,
                PaymentMethod.MOMO.value: config.MOMO_SUCCESS_RATE,
            },
            default_rate=config.DEFAULT_SUCCESS_RATE,
            **kwargs,
        )

    def success_rate(self, method: str) -> float:
        return self.success_rates.get(method, self.default_rate)

    def draw_delay_ms(self) -> float:
        """Uniform in [min_delay_ms, max_delay_ms)."""
        return self.min_delay_ms + self.rng.random() * (self.max_delay_ms - self.min_delay_ms)

    def settle(self, request: PaymentRequest) -> PaymentOutcome:
        ok = self.rng.random() < self.success_rate(request.method)
        return PaymentOutcome(
            success=ok,
            provider=request.method,
            account=request.account,
            amount=request.amount,
            reference=request.reference,
            tx_id=generate_id("tx"),
            time=_utc_timestamp(),
            message=SUCCESS_MESSAGE if ok else FAILURE_MESSAGE,
        )

    async def simulate(self, request: PaymentRequest) -> PaymentOutcome:
        await self.sleep(self.draw_delay_ms() / 1000)
        outcome = self.settle(request)
        logger.info(
            f"Mock payment {outcome.tx_id} via {outcome.provider}: "
            f"{'SUCCESS' if outcome.success else 'FAILURE'} (ref={outcome.reference})"
        )
        return outcome

simulator = PaymentSimulator.from_settings(settings)

async def simulate_payment(request: PaymentRequest) -> PaymentOutcome:
    return await simulator.simulate(request)
