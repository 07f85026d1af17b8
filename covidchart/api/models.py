from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .monitor import ResultMonitor


class MonitorSnapshot(BaseModel):
    """Counters for the last completed minute; ``ResponseTimeSum`` is in nanoseconds."""

    model_config = ConfigDict(populate_by_name=True)

    response_time_sum: int = Field(0, alias="ResponseTimeSum")
    response_count: int = Field(0, alias="ResponseCount")
    response_code_ok_count: int = Field(0, alias="ResponseCodeOkCount")
    response_code_ng_count: int = Field(0, alias="ResponseCodeNgCount")

    @classmethod
    def from_result(cls, result: ResultMonitor) -> "MonitorSnapshot":
        return cls.model_validate(result.to_payload())
