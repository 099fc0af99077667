# debt_radar/errors.py
from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for everything the load pipeline can raise internally."""

    def __init__(self, message: str, dataset: Optional[str] = None):
        super().__init__(message)
        self.dataset = dataset


class NetworkFailure(PipelineError):
    """Request rejected or transport error."""


class HttpFailure(PipelineError):
    def __init__(self, message: str, status_code: int, dataset: Optional[str] = None):
        super().__init__(message, dataset=dataset)
        self.status_code = status_code


class MalformedResponse(PipelineError):
    """Response body is not a dimensional document we can read."""


class BatchFailure(PipelineError):
    """One of the concurrent fetches of a load cycle raised."""

    def __init__(self, message: str, failures: Optional[dict] = None):
        super().__init__(message)
        self.failures = dict(failures or {})


class DataNotReady(PipelineError):
    """No load cycle has completed yet."""


class UnknownDataset(PipelineError, KeyError):
    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "unknown dataset"


__all__ = [
    "PipelineError",
    "NetworkFailure",
    "HttpFailure",
    "MalformedResponse",
    "BatchFailure",
    "DataNotReady",
    "UnknownDataset",
]
