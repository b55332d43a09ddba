"""Errors raised while fetching events from Subscan."""


class SubscanError(Exception):
    """Base class for Subscan event fetching errors."""


class SubscanAPIError(SubscanError):
    """Subscan answered with a nonzero error code."""

    def __init__(self, code: int, message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(f"Subscan API error {code}: {message}")


class MissingEventParametersError(SubscanError):
    """An event summary has no matching, non-empty parameter set."""

    def __init__(self, event_index: str) -> None:
        self.event_index = event_index
        super().__init__(
            f"Parameters could not be retrieved for event with index: {event_index}"
        )
