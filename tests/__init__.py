"""
Test suite for the weekly fill-rate reports backend.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_report_store.py -v
"""
