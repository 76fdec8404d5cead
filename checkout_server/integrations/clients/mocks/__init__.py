"""
Mock integration clients.

These clients return fake (but realistic) platform responses without calling
any external API. They are used when:
- No platform credentials are configured
- We want to test the API end-to-end without network access

Important:
- Mock clients follow the SAME interface as the real HTTP client
  (contracts.interfaces.PlatformClient).

Switching to real:
Selection happens in checkout_server/api/dependencies.py only.
"""
