"""
Contracts (data models).

This folder defines the request/response shapes exchanged with the payment
platform. Examples:
- Order create/capture payloads
- Vault setup/payment token payloads
- Shipping callback request/response formats
- Webhook verification payloads

Both mock and real HTTP clients use these contracts, so the API layer never
builds platform JSON by hand.
"""
