"""
Real HTTP integration clients.

These clients talk to the payment platform's REST API over HTTP:
- OAuth2 client-credentials and id tokens
- Orders v2, Payments v2
- Vault v3
- Billing agreements, catalog products, billing plans
- Webhook verification and management

Important:
- Must implement the same interface as the mock clients
- Must return data shaped according to checkout_server/integrations/contracts/*

Switching:
The selection of mock vs real clients happens in checkout_server/api/dependencies.py only.
"""
