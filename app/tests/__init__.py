"""
Tests Package

Test suite for the contractor scheduling service.

Modules:
- test_algorithms: Tests for pure algorithm functions
- test_agents: Tests for agent logic and service clients with mocked backends
- test_api: Tests for FastAPI endpoints

Run all tests:
    pytest app/tests/

Run specific test file:
    pytest app/tests/test_algorithms.py -v
"""
