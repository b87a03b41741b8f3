"""Tests for the Gotenberg PDF adapter."""
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.adapters.export.gotenberg import A4_HEIGHT, A4_WIDTH, MARGIN_10MM, GotenbergAdapter
from app.core.exceptions import ExportError
from app.core.ports.export import ExportPort


class TestGotenbergAdapter:
    def test_implements_port(self):
        assert isinstance(GotenbergAdapter("http://gotenberg:3000/"), ExportPort)

    def test_base_url_normalized(self):
        assert GotenbergAdapter("http://gotenberg:3000/").base_url == "http://gotenberg:3000"
        assert GotenbergAdapter().base_url == "http://localhost:3030"

    @pytest.mark.asyncio
    async def test_html_to_pdf(self):
        response = MagicMock(content=b"%PDF-1.7")
        with patch("app.adapters.export.gotenberg.requests.post", return_value=response) as post:
            pdf = await GotenbergAdapter("http://gotenberg:3000").html_to_pdf("<html>Тест</html>")

        assert pdf == b"%PDF-1.7"
        assert post.call_args.args[0] == "http://gotenberg:3000/forms/chromium/convert/html"
        data = post.call_args.kwargs["data"]
        assert data["paperWidth"] == A4_WIDTH
        assert data["paperHeight"] == A4_HEIGHT
        assert data["marginTop"] == MARGIN_10MM
        assert data["printBackground"] == "true"
        filename, content, content_type = post.call_args.kwargs["files"]["index.html"]
        assert content == "<html>Тест</html>".encode("utf-8")

    @pytest.mark.asyncio
    async def test_options_override(self):
        response = MagicMock(content=b"%PDF")
        with patch("app.adapters.export.gotenberg.requests.post", return_value=response) as post:
            await GotenbergAdapter().html_to_pdf("<html/>", {"landscape": "true"})
        assert post.call_args.kwargs["data"]["landscape"] == "true"

    @pytest.mark.asyncio
    async def test_failure_raises_export_error(self):
        with patch("app.adapters.export.gotenberg.requests.post",
                   side_effect=requests.ConnectionError("refused")):
            with pytest.raises(ExportError, match="PDF rendering failed"):
                await GotenbergAdapter().html_to_pdf("<html/>")

    @pytest.mark.asyncio
    async def test_health_check(self):
        with patch("app.adapters.export.gotenberg.requests.get", return_value=MagicMock(status_code=200)):
            assert await GotenbergAdapter().health_check() is True
        with patch("app.adapters.export.gotenberg.requests.get", side_effect=requests.Timeout()):
            assert await GotenbergAdapter().health_check() is False
