"""Recording UserFeedback for testing."""

from bonsai.core.user_feedback import UserFeedback


class FakeUserFeedback(UserFeedback):
    """Captures messages instead of printing them.

    Each message is stored as (level, text) in call order.
    """

    def __init__(self) -> None:
        self._messages: list[tuple[str, str]] = []

    @property
    def messages(self) -> list[tuple[str, str]]:
        return self._messages

    def text(self) -> str:
        """All messages joined by newlines, for substring assertions."""
        return "\n".join(message for _, message in self._messages)

    def by_level(self, level: str) -> list[str]:
        return [message for lvl, message in self._messages if lvl == level]

    def info(self, message: str) -> None:
        self._messages.append(("info", message))

    def success(self, message: str) -> None:
        self._messages.append(("success", message))

    def warning(self, message: str) -> None:
        self._messages.append(("warning", message))

    def error(self, message: str) -> None:
        self._messages.append(("error", message))
