"""Broker Relay - backend relay between the trading front end and the Dhan / Flattrade APIs."""

__version__ = "1.0.0"
