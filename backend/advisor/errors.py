"""Error taxonomy shared by the pipeline and the HTTP layer.

- UpstreamError: the catalog or model endpoint answered with a non-success
  status (or could not be reached). Never retried; the API renders it as a
  generic "try again" message.
- ParseError: a model response did not contain the JSON we asked for.
  Always recovered inside the pipeline, never shown to the user.
- ValidationError: user input is missing or malformed. Raised before any
  network call.
"""

from __future__ import annotations

from typing import Literal


class AdvisorError(Exception):
    """Base class for every error raised by the advisor package."""


class UpstreamError(AdvisorError):
    def __init__(
        self,
        status_code: int | None,
        status_text: str,
        *,
        source: Literal["catalog", "model"] = "catalog",
    ) -> None:
        self.status_code = status_code
        self.status_text = status_text
        self.source = source
        label = f"HTTP {status_code}" if status_code is not None else "network error"
        super().__init__(f"{source} request failed ({label}): {status_text}")


class ParseError(AdvisorError):
    def __init__(self, reason: str, raw_text: str = "") -> None:
        self.reason = reason
        self.raw_text = raw_text
        super().__init__(reason)


class ValidationError(AdvisorError):
    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)
