"""Domain errors and failure typing."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "config"
    TRANSPORT = "transport"
    DECODE = "decode"
    GEOCODE = "geocode"
    WRITE = "write"


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"
    kind: ErrorKind | None = None
    recoverable = False


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"
    kind = ErrorKind.CONFIG


class TransportError(PipelineError):
    """Raised when a directory request cannot be completed."""

    error_code = "TRANSPORT_ERROR"
    kind = ErrorKind.TRANSPORT


class DecodeError(PipelineError):
    """Raised when a payload does not match the expected record shape."""

    error_code = "DECODE_ERROR"
    kind = ErrorKind.DECODE


class GeocodeError(PipelineError):
    """Raised by geocoders; the enricher treats it as zero results."""

    error_code = "GEOCODE_ERROR"
    kind = ErrorKind.GEOCODE
    recoverable = True


class WriteError(PipelineError):
    """Raised when the CSV output cannot be written."""

    error_code = "WRITE_ERROR"
    kind = ErrorKind.WRITE
