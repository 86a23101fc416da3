class WatchError(Exception):
    """Base class for errors raised while polling and notifying."""


class ConfigurationError(WatchError):
    pass


class ProviderError(WatchError):
    """The YouTube search endpoint answered with a non-success status."""

    def __init__(self, status_code: int, reason: str):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"YouTube API error: {status_code} {reason}")


class MalformedResponseError(WatchError):
    pass


class CorruptStateError(WatchError):
    pass


class PersistenceError(WatchError):
    pass


class NotificationError(WatchError):
    """The Slack webhook rejected a message or could not be reached."""

    def __init__(self, status_code, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Slack API error: {status_code}\n{detail}")
