"""VPIN pipeline error types."""

from __future__ import annotations

from enum import Enum


class VPINErrorCode(Enum):
    """Error classification codes."""

    INVALID_PARAMETER = "invalid_parameter"
    EMPTY_INPUT = "empty_input"
    SCHEMA_ERROR = "schema_error"
    INSUFFICIENT_DATA = "insufficient_data"
    INVALID_VOLUME = "invalid_volume"
    UNORDERED_INPUT = "unordered_input"
    TIME_RANGE_ERROR = "time_range_error"
    DEGENERATE_DISTRIBUTION = "degenerate_distribution"
    INSUFFICIENT_BARS = "insufficient_bars"
    INSUFFICIENT_BUCKETS = "insufficient_buckets"


class VPINError(Exception):
    """VPIN exception with an error code.

    Every failure is final for the invocation that raised it: the caller
    has to fix the input or the parameters and run the pipeline again.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
    """

    code: VPINErrorCode

    def __init__(self, message: str, code: VPINErrorCode | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidParameter(VPINError):
    code = VPINErrorCode.INVALID_PARAMETER


class EmptyInput(VPINError):
    code = VPINErrorCode.EMPTY_INPUT


class SchemaError(VPINError):
    code = VPINErrorCode.SCHEMA_ERROR


class InsufficientData(VPINError):
    code = VPINErrorCode.INSUFFICIENT_DATA


class InvalidVolume(VPINError):
    code = VPINErrorCode.INVALID_VOLUME


class UnorderedInput(VPINError):
    code = VPINErrorCode.UNORDERED_INPUT


class TimeRangeError(VPINError):
    code = VPINErrorCode.TIME_RANGE_ERROR


class DegenerateDistribution(VPINError):
    """Price deltas have no usable spread (zero, NaN or infinite sdp)."""

    code = VPINErrorCode.DEGENERATE_DISTRIBUTION


class InsufficientBars(VPINError):
    code = VPINErrorCode.INSUFFICIENT_BARS


class InsufficientBuckets(VPINError):
    code = VPINErrorCode.INSUFFICIENT_BUCKETS
