"""
Test suite for the Guest Post Manager backend.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_row_validator.py -v
"""
