"""LLM usage logs: one audit row per evaluation attempt.

Components:
- UsageLogEntry: Dataclass mapping to the openai_logs table
- UsageStats: Aggregated counts and averages
- UsageLogConfig: Pydantic settings for page sizes and retention
- UsageLogRepository: Lifecycle writes, reporting reads and cleanup
"""

from thinkscore.usage_logs.config import UsageLogConfig
from thinkscore.usage_logs.repository import UsageLogRepository, summarize_usage
from thinkscore.usage_logs.schemas import VALID_STATUSES, UsageLogEntry, UsageStats

__all__ = [
    "UsageLogEntry",
    "UsageStats",
    "UsageLogConfig",
    "UsageLogRepository",
    "VALID_STATUSES",
    "summarize_usage",
]
