"""
BloodParser API

FastAPI-based REST API for blood test report analysis and comparison.
"""

from .bloodparser_api import create_app, BloodParserAPI

__all__ = ["create_app", "BloodParserAPI"]
