"""cookieguard: cookie-consent banner dark-pattern detection and scoring."""

__version__ = "0.3.0"
