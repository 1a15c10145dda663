from __future__ import annotations


class LLMError(Exception):
    """Base error for text-generation failures."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class LLMRateLimitError(LLMError):
    pass


class LLMAuthError(LLMError):
    pass


class LLMNotFoundError(LLMError):
    pass


class LLMForbiddenError(LLMError):
    pass


class LLMConnectionError(LLMError):
    pass


_STATUS_ERRORS: dict[int, type[LLMError]] = {
    401: LLMAuthError,
    403: LLMForbiddenError,
    404: LLMNotFoundError,
    429: LLMRateLimitError,
}


def error_for_status(status_code: int, message: str | None = None) -> LLMError:
    """
    Build the error matching an upstream HTTP status.
    The upstream message is kept verbatim when present.
    """
    cls = _STATUS_ERRORS.get(status_code, LLMError)
    return cls(message or f"HTTP {status_code}", status_code=status_code)


def parse_error_message(error: Exception) -> str:
    """
    Map raw exceptions into short, human-readable messages for logs.
    """
    s, t = str(error), type(error).__name__
    status = getattr(error, "status_code", None)
    if isinstance(error, LLMRateLimitError) or status == 429:
        return f"⚠️ Rate Limited: API provider is temporarily rate-limited ({s})"
    if isinstance(error, LLMAuthError) or status == 401:
        return f"❌ Authentication Error: Invalid API key or credentials ({s})"
    if isinstance(error, LLMNotFoundError) or status == 404:
        return f"❌ Not Found: The requested model or endpoint was not found ({s})"
    if isinstance(error, LLMForbiddenError) or status == 403:
        return f"❌ Forbidden: No permission to use this model or endpoint ({s})"
    if isinstance(error, LLMConnectionError) or "Connect" in t or "Timeout" in t:
        return f"❌ Connection Error: Unable to connect to the API provider ({s})"
    return f"❌ {t}: {s.split(chr(10))[0][:100]}"
