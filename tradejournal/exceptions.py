"""Exception hierarchy for TradeJournal."""


class JournalError(Exception):
    """Base class for all TradeJournal errors."""


class ConfigError(JournalError):
    """Raised when the configuration file cannot be read."""


class TradeNotFoundError(JournalError):
    """Raised when a trade ID does not exist for the owner."""

    def __init__(self, trade_id: int):
        self.trade_id = trade_id
        super().__init__(f"No trade found with ID {trade_id}")


class TradeStateError(JournalError):
    """Raised on a lifecycle transition the trade's status does not allow."""


class NoTradesError(JournalError):
    """Raised when a report needs at least one trade and got none."""


class InvalidPeriodError(JournalError, ValueError):
    """Raised for an unknown named reporting period."""


class InvalidWindowError(JournalError, ValueError):
    """Raised when time windows are malformed or overlap."""
