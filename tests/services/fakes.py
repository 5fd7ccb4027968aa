"""Test doubles shared by service and API tests."""

ADMIN_KEY = "admin-key"
VIEWER_KEY = "viewer-key"
ADMIN_HEADERS = {"Authorization": f"Bearer {ADMIN_KEY}"}
VIEWER_HEADERS = {"Authorization": f"Bearer {VIEWER_KEY}"}


class RecordingReporter:
    """Reporter that remembers every failure it was handed."""

    def __init__(self, name: str = "recording"):
        self.name = name
        self.reported: list[BaseException] = []

    async def report(self, error: BaseException) -> str | None:
        self.reported.append(error)
        return f"{self.name}-{len(self.reported)}"


class RecordingSink:
    """FailureSink stand-in for services tested without a dispatcher."""

    def __init__(self):
        self.reported: list[BaseException] = []

    async def report(self, error: BaseException) -> dict[str, str]:
        self.reported.append(error)
        return {"recording": f"recording-{len(self.reported)}"}


class FakeNotifier:
    """Notifier that records welcome calls, optionally failing."""

    def __init__(self):
        self.sent: list[tuple] = []
        self.fail_with: Exception | None = None

    async def send_welcome(self, user, activation_token: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append((user, activation_token))
