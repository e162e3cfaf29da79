import requests

import notifier
from models import Classification, EvaluationResult


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


def make_result(**overrides):
    fields = dict(
        id="m-1",
        timestamp="2026-01-01T00:00:00Z",
        sender="+15551234567",
        content="Need a chef for a party",
        score=0.72,
        matchedKeywords=("chef", "party"),
        matchedCategories=("service", "event"),
        classification=Classification.HIGH,
        shouldForward=True,
    )
    fields.update(overrides)
    return EvaluationResult(**fields)


def test_embed_contents():
    embed = notifier.build_lead_embed(make_result(), "lead-1")
    assert embed["color"] == 5763719
    assert "+15551234567" in embed["description"]
    fields = {f["name"]: f["value"] for f in embed["fields"]}
    assert fields["Confidence"] == "72% (High)"
    assert fields["Lead ID"] == "lead-1"
    assert fields["Categories"] == "Service, Event"
    assert fields["Keywords"] == "chef, party"


def test_embed_without_matches_uses_defaults():
    embed = notifier.build_lead_embed(
        make_result(matchedKeywords=(), matchedCategories=(), classification=Classification.NONE), "lead-2"
    )
    fields = {f["name"]: f["value"] for f in embed["fields"]}
    assert embed["color"] == notifier.DEFAULT_COLOR
    assert fields["Keywords"] == "None"
    assert fields["Categories"] == "None"


def test_send_posts_payload(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse(204)

    monkeypatch.setattr(notifier.requests, "post", fake_post)
    assert notifier.send_lead_notification(make_result(), "lead-1", webhook_url="https://discord.test/hook") is True

    url, payload, timeout = calls[0]
    assert url == "https://discord.test/hook"
    assert payload["username"] == notifier.Config.DISCORD_USERNAME
    assert payload["embeds"][0]["fields"][1]["value"] == "lead-1"
    assert timeout == notifier.Config.NOTIFICATION_TIMEOUT


def test_send_reports_http_failure(monkeypatch):
    monkeypatch.setattr(notifier.requests, "post", lambda *a, **kw: FakeResponse(500, "boom"))
    assert notifier.send_lead_notification(make_result(), "lead-1", webhook_url="https://discord.test/hook") is False


def test_send_reports_network_failure(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("down")

    monkeypatch.setattr(notifier.requests, "post", fake_post)
    assert notifier.send_lead_notification(make_result(), "lead-1", webhook_url="https://discord.test/hook") is False


def test_send_skipped_without_url(monkeypatch):
    monkeypatch.setattr(notifier.Config, "DISCORD_WEBHOOK_URL", None)
    monkeypatch.setattr(notifier.requests, "post", lambda *a, **kw: FakeResponse(204))
    assert notifier.send_lead_notification(make_result(), "lead-1") is False
