from infra.config import Config

from infra.llm import (
    LLMClient,
    PricingCache,
    CostCalculator,
)

from infra.storage import (
    HistoryStore,
    HistoryPage,
)

from infra.logger import (
    TutorLogger,
    create_logger,
)

__all__ = [
    "Config",

    "LLMClient",
    "PricingCache",
    "CostCalculator",

    "HistoryStore",
    "HistoryPage",

    "TutorLogger",
    "create_logger",
]
