"""Trading signal model — produced upstream, consumed by the gate."""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SignalLevel(str, Enum):
    """Conviction tier. LEVEL_1 is the highest."""

    LEVEL_1 = "LEVEL_1"
    LEVEL_2 = "LEVEL_2"
    LEVEL_3 = "LEVEL_3"


class TradingSignal(BaseModel):
    """An immutable trading recommendation emitted by the analysis engine."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    indicator: str
    signal_type: str
    level: SignalLevel = SignalLevel.LEVEL_3
    score: int = Field(default=0, ge=0, le=10)
    stop_loss: float = 0.0  # 0.0 = unset
    take_profit: float = 0.0  # 0.0 = unset
    explanation: dict[str, Any] = Field(default_factory=dict)
    ts: datetime | None = None

    @property
    def cooldown_key(self) -> str:
        return f"{self.symbol}_{self.signal_type}"

    @property
    def risk_reward_ratio(self) -> float | None:
        """Numeric ``risk_reward_ratio`` from the explanation, else None."""
        value = self.explanation.get("risk_reward_ratio")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if math.isnan(value):
            return None
        return float(value)

    @property
    def has_trade_plan(self) -> bool:
        return self.stop_loss != 0.0 and self.take_profit != 0.0
