"""Reusable async fakes for handler tests."""

from __future__ import annotations

from dataclasses import dataclass

from bot.models.lead import LeadRecord


@dataclass
class FakeUser:
    id: int
    username: str | None = "tester"
    language_code: str | None = "en"


class FakeState:
    def __init__(self, data: dict | None = None) -> None:
        self.state = None
        self.data: dict = dict(data or {})
        self.cleared = False

    async def set_state(self, state) -> None:  # noqa: ANN001
        self.state = state

    async def update_data(self, **kwargs) -> None:  # noqa: ANN003
        self.data.update(kwargs)

    async def get_data(self) -> dict:
        return dict(self.data)

    async def clear(self) -> None:
        self.state = None
        self.data = {}
        self.cleared = True


class FakeMessage:
    def __init__(self, from_user: FakeUser, text: str | None = None) -> None:
        self.from_user = from_user
        self.text = text
        self.answers: list[tuple[str, dict]] = []
        self.edits: list[tuple[str, dict]] = []

    async def answer(self, text: str, **kwargs):  # noqa: ANN003
        self.answers.append((text, kwargs))

    async def edit_text(self, text: str, **kwargs):  # noqa: ANN003
        self.edits.append((text, kwargs))


class FakeCallback:
    def __init__(self, from_user: FakeUser, data: str = "", message=None):  # noqa: ANN001
        self.from_user = from_user
        self.data = data
        self.message = message or FakeMessage(from_user)
        self.answers: list[tuple[str | None, bool]] = []

    async def answer(self, text: str | None = None, show_alert: bool = False):
        self.answers.append((text, show_alert))


class FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.added: list[object] = []

    async def commit(self):
        self.commits += 1

    def add(self, obj):  # noqa: ANN001
        self.added.append(obj)


def build_record(record_id: int, **fields) -> LeadRecord:  # noqa: ANN003
    """Unsaved LeadRecord with outreach status ``new`` unless given."""
    fields.setdefault("user_id", 1)
    fields.setdefault("business_type", "local_service")
    fields.setdefault("outreach_status", "new")
    return LeadRecord(id=record_id, **fields)


def flatten(markup) -> list[tuple[str, str]]:  # noqa: ANN001
    return [(btn.text, btn.callback_data) for row in markup.inline_keyboard for btn in row]
