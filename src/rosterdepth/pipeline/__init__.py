"""Pipeline orchestration."""

from .service import (
    AlgorithmOutcome,
    PipelineInputs,
    PipelineResult,
    PipelineSources,
    load_inputs,
    run_pipeline,
)

__all__ = [
    "AlgorithmOutcome",
    "PipelineInputs",
    "PipelineResult",
    "PipelineSources",
    "load_inputs",
    "run_pipeline",
]
