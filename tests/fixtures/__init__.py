"""
Pytest fixtures for the AdoRest test suite.

Fixtures are organized by subsystem:
- http_mocking: HTTPX MockTransport recording, response builders and client factories
- credentials: Fake token sources for bearer-credential tests
"""
