"""
Pytest test suite for the storefront payment bridge.

Test categories:
- Unit tests: adapters and the notification dispatcher with faked SDKs
- API tests: the FastAPI app over httpx with dependency overrides
"""
