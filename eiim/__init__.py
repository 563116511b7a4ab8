"""Environmental Impact Investing Monitor - collection and briefing core."""

__version__ = "0.1.0"
