"""Checkout server: payment-platform proxy with a server-side shipping callback."""
