from .fan_out_service import FanOutService
from .invocation_service import InvocationService
from .record_filter import FilterDecision, SkipReason, build_messages, evaluate_record

__all__ = [
    "FanOutService",
    "FilterDecision",
    "InvocationService",
    "SkipReason",
    "build_messages",
    "evaluate_record",
]
