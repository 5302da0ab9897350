# tests/integration/client/test_int_tika_server.py — v1
"""Integration tests against a real Apache Tika server container."""

from __future__ import annotations

import pytest

from tikaclient.client.client_factory import prepare
from tikaclient.config.settings import Settings
from tikaclient.core.errors import NotFoundError, TransientTransportError
from tikaclient.core.models import DocumentMetadata

pytestmark = pytest.mark.tika


class TestEngineInformation:
    def test_version(self, tika_client):
        assert tika_client.get_version().startswith("Apache Tika")

    def test_mime_types(self, tika_client):
        types = tika_client.get_supported_mime_types()
        assert "application/pdf" in types
        assert "alias" in types["application/pdf"]

    def test_parsers(self, tika_client):
        tree = tika_client.get_available_parsers()
        assert tree["composite"] is True
        assert tree["children"]

    def test_detectors(self, tika_client):
        assert tika_client.get_available_detectors()["name"]


class TestExtraction:
    def test_text(self, tika_client, english_document):
        assert "quarterly report" in tika_client.get_text(str(english_document))

    def test_text_streamed(self, tika_client, english_document):
        seen: list[str] = []
        text = tika_client.get_text(str(english_document), callback=seen.append)
        assert "".join(seen) == text

    def test_html(self, tika_client, english_document):
        assert "<html" in tika_client.get_html(str(english_document))

    def test_mime(self, tika_client, english_document):
        assert tika_client.get_mime(str(english_document)) == "text/plain"

    def test_language(self, tika_client, english_document):
        assert tika_client.get_language(str(english_document)) == "en"

    def test_metadata(self, tika_client, english_document):
        meta = tika_client.get_metadata(str(english_document))
        assert isinstance(meta, DocumentMetadata)
        assert meta.mime == "text/plain"

    def test_recursive_metadata(self, tika_client, english_document):
        result = tika_client.get_recursive_metadata(str(english_document), "text")
        assert list(result) == ["letter.txt"]
        assert "quarterly report" in (result["letter.txt"].content or "")


class TestFailures:
    def test_missing_file(self, tika_client, tmp_path):
        with pytest.raises(NotFoundError):
            tika_client.get_text(str(tmp_path / "missing.pdf"))

    def test_unreachable_server(self):
        client = prepare("http://127.0.0.1:1", settings=Settings(_env_file=None))
        with pytest.raises(TransientTransportError):
            client.get_version()
