"""
Utility functions for seqops

Logging setup, performance measurement of sequence operations and helpers
that apply a validated PipelineRequest to a source sequence.
"""

import gc
import logging
import sys
import time
import tracemalloc
from collections import deque
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from seqops.lazy import LazyCollection
from seqops.models import (
    OperationStep,
    OperationType,
    OpsConfig,
    PerformanceInfo,
    PipelineRequest,
    PipelineResult,
)

logger = logging.getLogger(__name__)


def setup_logging(config: Optional[OpsConfig] = None) -> logging.Logger:
    """Setup logging for seqops and return the package logger"""
    config = config or OpsConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - [%(funcName)s:%(lineno)d] - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    package_logger = logging.getLogger("seqops")
    package_logger.setLevel(config.log_level)
    return package_logger


# ---------- Performance tracking ----------

# Most recent operations kept in detail; totals cover every operation
MAX_RECORDED_OPERATIONS = 1000

# Global performance tracking
_performance_metrics = {
    "operations": deque(maxlen=MAX_RECORDED_OPERATIONS),
    "total_time_ms": 0.0,
    "total_memory_mb": 0.0,
    "operation_count": 0,
    "failed_count": 0
}


def _record(info: PerformanceInfo) -> None:
    _performance_metrics["operations"].append(info)
    _performance_metrics["total_time_ms"] += info.execution_time_ms
    _performance_metrics["total_memory_mb"] += info.memory_usage_mb
    _performance_metrics["operation_count"] += 1
    if not info.success:
        _performance_metrics["failed_count"] += 1


def _size_of(value: Any) -> Optional[int]:
    return len(value) if hasattr(value, "__len__") else None


def measure_performance(operation_name: str, func: Callable, *args, **kwargs) -> Tuple[Any, PerformanceInfo]:
    """Measure execution time and peak memory of a function call.

    Returns (result, info). Failures are recorded too and then re-raised.
    When the caller already runs tracemalloc its session is left untouched,
    so the reported peak is the peak of that session.
    """
    already_tracing = tracemalloc.is_tracing()
    gc.collect()
    if not already_tracing:
        # never reset a peak that belongs to the caller's tracing session
        tracemalloc.start()

    input_size = _size_of(args[0]) if args else None
    start_time = time.perf_counter()

    try:
        result = func(*args, **kwargs)
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()
    except Exception as e:
        execution_time_ms = (time.perf_counter() - start_time) * 1000
        _, peak = tracemalloc.get_traced_memory()
        info = PerformanceInfo(
            operation=operation_name,
            execution_time_ms=execution_time_ms,
            memory_usage_mb=peak / 1024 / 1024,
            input_size=input_size,
            success=False,
            error=str(e)
        )
        _record(info)
        logger.error(f"{operation_name} failed after {execution_time_ms:.2f} ms: {e}")
        raise
    finally:
        if not already_tracing:
            tracemalloc.stop()

    info = PerformanceInfo(
        operation=operation_name,
        execution_time_ms=execution_time_ms,
        memory_usage_mb=peak / 1024 / 1024,
        input_size=input_size,
        output_size=_size_of(result),
        success=True
    )
    _record(info)
    logger.debug(f"{operation_name} completed in {execution_time_ms:.2f} ms")
    return result, info


def get_performance_summary() -> Dict[str, Any]:
    """Get summary of all performance metrics"""
    count = _performance_metrics["operation_count"]
    if count == 0:
        return {
            "total_operations": 0,
            "failed_operations": 0,
            "total_time_ms": 0.0,
            "total_memory_mb": 0.0,
            "avg_time_ms": 0.0,
            "avg_memory_mb": 0.0
        }

    return {
        "total_operations": count,
        "failed_operations": _performance_metrics["failed_count"],
        "total_time_ms": _performance_metrics["total_time_ms"],
        "total_memory_mb": _performance_metrics["total_memory_mb"],
        "avg_time_ms": _performance_metrics["total_time_ms"] / count,
        "avg_memory_mb": _performance_metrics["total_memory_mb"] / count
    }


def clear_performance_metrics():
    """Clear all performance metrics"""
    global _performance_metrics
    _performance_metrics = {
        "operations": deque(maxlen=MAX_RECORDED_OPERATIONS),
        "total_time_ms": 0.0,
        "total_memory_mb": 0.0,
        "operation_count": 0,
        "failed_count": 0
    }


# ---------- Pipelines ----------

def build_pipeline(source: Sequence[Any], request: PipelineRequest,
                   config: Optional[OpsConfig] = None) -> LazyCollection:
    """Translate a PipelineRequest into a LazyCollection over source"""
    config = config or OpsConfig()
    rng = None
    lazy_col = LazyCollection(source, cache_enabled=request.enable_caching)

    for step in request.steps:
        if step.type == OperationType.MAP:
            lazy_col = lazy_col.map(step.fn)
        elif step.type == OperationType.MAP_INDEXED:
            lazy_col = lazy_col.map_indexed(step.fn)
        elif step.type == OperationType.FILTER:
            lazy_col = lazy_col.filter(step.fn)
        elif step.type == OperationType.LIMIT:
            lazy_col = lazy_col.limit(step.count)
        elif step.type == OperationType.SKIP:
            lazy_col = lazy_col.skip(step.count)
        elif step.type == OperationType.BATCH:
            size = step.size if step.size is not None else config.default_batch_size
            lazy_col = lazy_col.batch(size)
        elif step.type == OperationType.UNIQUE:
            lazy_col = lazy_col.unique()
        elif step.type == OperationType.DELETE:
            lazy_col = lazy_col.delete(step.value)
        elif step.type == OperationType.REVERSE:
            lazy_col = lazy_col.reverse()
        elif step.type == OperationType.SHUFFLE:
            # one rng per pipeline so a seeded config reproduces the whole run
            if rng is None:
                rng = config.make_rng()
            lazy_col = lazy_col.shuffle(rng)

    return lazy_col


def run_pipeline(source: Sequence[Any], request: PipelineRequest,
                 config: Optional[OpsConfig] = None) -> PipelineResult:
    """Run a pipeline over source and report the outcome.

    Errors raised by step callables are logged and returned as a failed
    PipelineResult rather than raised.
    """
    config = config or OpsConfig()
    operations_applied = [step.type.value for step in request.steps]
    logger.info(f"Running pipeline of {len(request.steps)} steps over {_size_of(source)} items")

    start_time = time.perf_counter()
    try:
        lazy_col = build_pipeline(source, request, config)
        if config.track_performance:
            result, performance = measure_performance("pipeline", lazy_col.to_list)
            performance.input_size = _size_of(source)
        else:
            result = lazy_col.to_list()
            performance = PerformanceInfo(
                operation="pipeline",
                execution_time_ms=(time.perf_counter() - start_time) * 1000,
                input_size=_size_of(source),
                output_size=len(result)
            )

        return PipelineResult(
            success=True,
            result=result,
            operations_applied=operations_applied,
            performance=performance
        )

    except Exception as e:
        processing_time_ms = (time.perf_counter() - start_time) * 1000
        logger.error(f"Pipeline failed after {processing_time_ms:.2f} ms: {e}")
        return PipelineResult(
            success=False,
            operations_applied=operations_applied,
            performance=PerformanceInfo(
                operation="pipeline",
                execution_time_ms=processing_time_ms,
                input_size=_size_of(source),
                success=False,
                error=str(e)
            ),
            error=str(e)
        )


def process_batches(source: Sequence[Any], batch_size: Optional[int] = None,
                    max_batches: Optional[int] = None,
                    steps: Optional[List[OperationStep]] = None,
                    config: Optional[OpsConfig] = None) -> PipelineResult:
    """Apply optional steps, then split the output into batches"""
    all_steps = list(steps or [])
    all_steps.append(OperationStep(type=OperationType.BATCH, size=batch_size))
    if max_batches is not None:
        all_steps.append(OperationStep(type=OperationType.LIMIT, count=max_batches))
    return run_pipeline(source, PipelineRequest(steps=all_steps), config)
