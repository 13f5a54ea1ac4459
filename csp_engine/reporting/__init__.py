"""Reported-output aggregation for component models."""

from .reported_outputs import (
    AggregationKind,
    OutputInfo,
    ReportedOutputs,
    ReportedQuantity,
)

__all__ = ["AggregationKind", "OutputInfo", "ReportedOutputs", "ReportedQuantity"]
