"""
Workflow Module
===============

Multi-call orchestration: the sequential batch runner, the concurrent
variant fan-outs and the single-shot studio tools.
"""

from .batch import BatchRunner, BatchItem, BatchItemState, BatchReport, split_prompts
from .fanout import fan_out, FanOutResult, BranchFailure
from .variants import VariantGenerator
from .tools import StudioTools, LookbookReport

__all__ = [
    "BatchRunner",
    "BatchItem",
    "BatchItemState",
    "BatchReport",
    "split_prompts",
    "fan_out",
    "FanOutResult",
    "BranchFailure",
    "VariantGenerator",
    "StudioTools",
    "LookbookReport",
]
