"""Recording notification sink for development and testing.

Keeps every notice it receives in ``sent``. Can be configured to raise on
emit, to check that a failing sink never disturbs order processing.
"""

from storefront.notifications.port import Notice, NotificationSink, NotificationType


class FakeNotificationSink(NotificationSink):
    def __init__(self) -> None:
        self.sent: list[Notice] = []
        self.should_fail: bool = False
        self.failure_reason: str = "Sink unavailable"

    def configure(self, should_fail: bool, failure_reason: str = "Sink unavailable") -> None:
        self.should_fail = should_fail
        self.failure_reason = failure_reason

    def emit(self, notice: Notice) -> None:
        if self.should_fail:
            raise RuntimeError(self.failure_reason)
        self.sent.append(notice)

    def of_type(self, notification_type: NotificationType) -> list[Notice]:
        return [n for n in self.sent if n.notification_type == notification_type]

    def reset(self) -> None:
        self.sent.clear()
        self.should_fail = False
        self.failure_reason = "Sink unavailable"
