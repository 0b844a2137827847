# fastapi_webquery/exceptions.py


class WebQueryError(Exception):
    """Base class for every error raised by fastapi_webquery."""


class FilterParseError(WebQueryError):
    """Raised when request parameters cannot be turned into filter values."""


class EmptyKeyError(FilterParseError):
    """A filter was declared without a request key."""

    def __init__(self) -> None:
        super().__init__("filter key is empty")


class RequiredValueMissingError(FilterParseError):
    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"filter key [{key}] is required")


class ValueConversionError(FilterParseError, ValueError):
    """A raw parameter could not be converted to the filter's type.

    ``kind`` names the target type (``int``, ``bool``, ``time``) and ``raw``
    is the offending text as it appeared in the request.
    """

    def __init__(self, key: str, kind: str, raw: str) -> None:
        self.key = key
        self.kind = kind
        self.raw = raw
        super().__init__(f"filter key [{key}]: cannot parse {raw!r} as {kind}")
