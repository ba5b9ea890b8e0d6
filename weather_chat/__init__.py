"""Weather chat backend: a tool-calling chat service with NWS forecasts."""

__version__ = "0.1.0"
