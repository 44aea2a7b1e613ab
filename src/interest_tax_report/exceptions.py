"""
Custom exception classes for the interest income tax report.

Every error raised while computing the report derives from ``TaxReportError``,
so the command line entry point can surface any of them to the user.
"""
from interest_tax_report.constants import DATE_FORMAT_DISPLAY


class TaxReportError(Exception):
    """Base exception for all tax report errors."""
    pass


class ConfigurationError(TaxReportError):
    """Raised when there's an error in the configuration."""
    pass


class ValidationError(TaxReportError):
    """Raised when input validation fails."""
    pass


class CurrencyMismatchError(TaxReportError):
    """Raised when cash amounts in different currencies are combined directly."""
    pass


class RateUnavailableError(TaxReportError):
    """Raised when no exchange rate is known for a date and currency pair."""
    pass


class ConversionError(TaxReportError):
    """Raised when a currency conversion fails for any other reason."""
    pass


class TaxComputationError(TaxReportError):
    """Raised when the tax owed for a payment can't be computed."""
    pass


class FilingRejectedError(TaxReportError):
    """Raised when the tax statement rejects an income entry."""

    def __init__(self, date, reason: str):
        self.date = date
        self.reason = reason
        super().__init__(
            f"Unable to add interest income from {date.strftime(DATE_FORMAT_DISPLAY)} to the tax statement: {reason}")


class ReportGenerationError(TaxReportError):
    """Raised when there's an error generating a report."""
    pass
