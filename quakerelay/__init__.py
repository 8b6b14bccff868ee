"""Relay P2PQuake seismic-intensity reports to Discord webhooks."""

__version__ = "0.1.0"
