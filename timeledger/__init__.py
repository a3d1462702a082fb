"""Time ledger: books work hours against project tasks and reports daily totals."""

__version__ = "1.0.0"
