"""Clients for the upstream movie metadata providers."""
