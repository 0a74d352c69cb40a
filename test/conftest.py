import pytest


class FakeProvider:
    """Replays canned responses (or raises canned errors) in order and records calls."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls = []

    async def generate(self, *, messages, model, temperature, max_tokens) -> str:
        self.calls.append(
            {"messages": list(messages), "model": model, "temperature": temperature, "max_tokens": max_tokens}
        )
        item = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(item, BaseException):
            raise item
        return item

    async def list_models(self):
        return ["fake-model"]


class FakeTextExtractor:
    def __init__(self, text: str = "INVOICE #7 total $120.00 due 2026-02-01"):
        self.text = text
        self.calls = []

    async def extract_text(self, path: str) -> str:
        self.calls.append(path)
        return self.text


@pytest.fixture
def fake_provider_factory():
    def _make(*responses):
        return FakeProvider(*responses)
    return _make


@pytest.fixture
def fake_text_extractor():
    return FakeTextExtractor()


@pytest.fixture
def pdf_file(tmp_path):
    path = tmp_path / "invoice.pdf"
    path.write_bytes(b"%PDF-1.4 fake")
    return str(path)
