from infra.storage.history import (
    HistoryStore,
    HistoryPage,
    HistoryWriteError,
    Subscription,
)

__all__ = [
    "HistoryStore",
    "HistoryPage",
    "HistoryWriteError",
    "Subscription",
]
