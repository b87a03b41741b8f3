"""Tests for tolerant JSON extraction from LLM responses."""
import pytest
from app.core.extraction.response_parser import ResponseParser


class TestResponseParser:
    """Test JSON object parsing from LLM responses."""

    @pytest.fixture
    def parser(self):
        return ResponseParser()

    def test_parse_raw_json(self, parser):
        response = '{"tests": [{"test_name": "Hemoglobin", "value": 135}]}'
        result = parser.parse_object(response)
        assert result["tests"][0]["value"] == 135

    def test_parse_markdown_code_block(self, parser):
        response = 'Here you go:\n```json\n{"mappings": {"Hb": "Гемоглобин"}}\n```\nDone.'
        result = parser.parse_object(response)
        assert result == {"mappings": {"Hb": "Гемоглобин"}}

    def test_parse_fence_without_language(self, parser):
        response = '```\n{"a": 1}\n```'
        assert parser.parse_object(response) == {"a": 1}

    def test_parse_object_inside_prose(self, parser):
        response = 'The result is {"patient_info": {"name": "Иванов"}, "tests": []} as requested.'
        result = parser.parse_object(response)
        assert result["patient_info"]["name"] == "Иванов"

    def test_unterminated_fence(self, parser):
        response = '```json\n{"tests": []}'
        assert parser.parse_object(response) == {"tests": []}

    def test_trailing_comma_repaired(self, parser):
        response = '{"tests": [{"test_name": "ALT",},],}'
        result = parser.parse_object(response)
        assert result["tests"][0]["test_name"] == "ALT"

    def test_object_inside_array(self, parser):
        assert parser.parse_object('[{"a": 1}]') == {"a": 1}

    def test_array_without_object(self, parser):
        assert parser.parse_object("[1, 2]") is None

    def test_nothing_parses(self, parser):
        assert parser.parse_object("") is None
        assert parser.parse_object("   ") is None
        assert parser.parse_object(None) is None
        assert parser.parse_object("No data found.") is None
        assert parser.parse_object("{not json}") is None
