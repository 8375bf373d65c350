"""TradeJournal - personal trading journal with performance analytics."""

__version__ = "0.1.0"
