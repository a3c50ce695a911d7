"""Relay - backend token service client."""
