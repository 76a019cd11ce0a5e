"""Performance profiler for Query String Transformer operations."""

import time
import psutil
import logging
from typing import Dict, Any, Optional, List
from dataclasses import dataclass
from contextlib import contextmanager


@dataclass
class PerformanceMetrics:
    """Performance metrics for a single transform operation."""
    operation_name: str
    duration: float
    input_size: int
    output_size: int
    memory_start_mb: float
    memory_end_mb: float
    throughput_mbps: float


class PerformanceProfiler:
    """
    Records duration, sizes and process memory for transform operations.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the performance profiler.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.metrics_history: List[PerformanceMetrics] = []

    @contextmanager
    def profile_operation(self, operation_name: str, input_size: int = 0):
        """
        Context manager for profiling operations.

        The yielded dict accepts an ``output_size`` entry set by the caller.

        Args:
            operation_name: Name of the operation being profiled
            input_size: Size of input data in bytes
        """
        report: Dict[str, Any] = {"output_size": 0}
        start_time = time.perf_counter()
        start_memory = self._memory_mb()
        self.logger.debug(f"Started profiling: {operation_name}")

        try:
            yield report
        finally:
            duration = time.perf_counter() - start_time
            throughput = (input_size / 1024 / 1024) / duration if duration > 0 else 0
            metrics = PerformanceMetrics(
                operation_name=operation_name,
                duration=duration,
                input_size=input_size,
                output_size=report["output_size"],
                memory_start_mb=start_memory,
                memory_end_mb=self._memory_mb(),
                throughput_mbps=throughput
            )
            self.metrics_history.append(metrics)
            self.logger.debug(f"Performance Summary - {operation_name}: "
                              f"{duration * 1000:.3f}ms, {input_size}B in, "
                              f"{metrics.output_size}B out, {metrics.memory_end_mb:.1f} MB RSS")

    def _memory_mb(self) -> float:
        try:
            return psutil.Process().memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            self.logger.warning(f"Performance sampling failed: {e}")
            return 0.0

    def get_performance_summary(self) -> Dict[str, Any]:
        """
        Get summary of all performance metrics.

        Returns:
            Dictionary with performance summary
        """
        if not self.metrics_history:
            return {"total_operations": 0}

        total_duration = sum(m.duration for m in self.metrics_history)
        total_input = sum(m.input_size for m in self.metrics_history)
        total_output = sum(m.output_size for m in self.metrics_history)

        return {
            "total_operations": len(self.metrics_history),
            "total_duration": total_duration,
            "total_input_bytes": total_input,
            "total_output_bytes": total_output,
            "peak_memory_mb": max(m.memory_end_mb for m in self.metrics_history),
            "operations": [
                {
                    "name": m.operation_name,
                    "duration": m.duration,
                    "throughput": m.throughput_mbps
                }
                for m in self.metrics_history
            ]
        }
