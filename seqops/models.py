"""
Pydantic models for seqops

Configuration, pipeline descriptions and pipeline results.
"""

import logging
import os
import random
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class OpsConfig(BaseModel):
    """Runtime configuration for pipelines, logging and performance tracking"""
    log_level: str = Field(
        "INFO",
        description="Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    seed: Optional[int] = Field(
        None,
        description="Seed for the random source used by shuffle steps; None means unseeded"
    )
    track_performance: bool = Field(
        False,
        description="Record timing and peak memory of pipeline runs"
    )
    default_batch_size: int = Field(
        100,
        gt=0,
        description="Batch size used by batch steps that do not set one"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Normalise and validate the logging level name"""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @classmethod
    def from_env(cls) -> "OpsConfig":
        """Build a config from SEQOPS_* environment variables"""
        values: Dict[str, Any] = {}
        if os.getenv("SEQOPS_LOG_LEVEL"):
            values["log_level"] = os.getenv("SEQOPS_LOG_LEVEL")
        if os.getenv("SEQOPS_SEED"):
            values["seed"] = os.getenv("SEQOPS_SEED")
        if os.getenv("SEQOPS_TRACK_PERFORMANCE"):
            values["track_performance"] = os.getenv("SEQOPS_TRACK_PERFORMANCE")
        if os.getenv("SEQOPS_BATCH_SIZE"):
            values["default_batch_size"] = os.getenv("SEQOPS_BATCH_SIZE")
        return cls(**values)

    def make_rng(self) -> random.Random:
        """Return a dedicated random source, seeded when seed is set"""
        return random.Random(self.seed)


class OperationType(str, Enum):
    """Pipeline step types"""
    MAP = "map"
    MAP_INDEXED = "map_indexed"
    FILTER = "filter"
    LIMIT = "limit"
    SKIP = "skip"
    BATCH = "batch"
    UNIQUE = "unique"
    DELETE = "delete"
    REVERSE = "reverse"
    SHUFFLE = "shuffle"


_CALLABLE_STEPS = {OperationType.MAP, OperationType.MAP_INDEXED, OperationType.FILTER}
_COUNT_STEPS = {OperationType.LIMIT, OperationType.SKIP}


class OperationStep(BaseModel):
    """A single step of a pipeline"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: OperationType = Field(..., description="Operation to apply")
    fn: Optional[Callable[..., Any]] = Field(
        None,
        description="Transform or predicate for map, map_indexed and filter"
    )
    count: Optional[int] = Field(None, description="Element count for limit and skip")
    size: Optional[int] = Field(None, description="Chunk size for batch")
    value: Any = Field(None, description="Value removed by delete")

    @model_validator(mode='after')
    def validate_step_arguments(self):
        """Enforce that each step carries the argument it needs"""
        if self.type in _CALLABLE_STEPS and self.fn is None:
            raise ValueError(f"{self.type.value} step requires fn")
        if self.type in _COUNT_STEPS and self.count is None:
            raise ValueError(f"{self.type.value} step requires count")
        if self.type == OperationType.DELETE and "value" not in self.model_fields_set:
            raise ValueError("delete step requires value (pass value=None to drop None entries)")
        return self


class PipelineRequest(BaseModel):
    """An ordered list of steps applied to a source sequence"""
    steps: List[OperationStep] = Field(default_factory=list, description="Steps in application order")
    enable_caching: bool = Field(False, description="Memoise realised results")


class PerformanceInfo(BaseModel):
    """Timing and memory of one measured operation"""
    operation: str
    execution_time_ms: float = 0.0
    memory_usage_mb: float = 0.0
    input_size: Optional[int] = None
    output_size: Optional[int] = None
    success: bool = True
    error: Optional[str] = None


class PipelineResult(BaseModel):
    """Outcome of running a pipeline"""
    success: bool = Field(True, description="Whether the pipeline completed")
    result: List[Any] = Field(default_factory=list, description="Realised output")
    operations_applied: List[str] = Field(default_factory=list)
    performance: Optional[PerformanceInfo] = None
    error: Optional[str] = None
