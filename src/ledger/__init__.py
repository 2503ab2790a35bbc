"""Per-user deposit/withdrawal ledger with reference-currency valuation."""

__version__ = "0.1.0"
