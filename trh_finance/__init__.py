"""
TRH Finance

Fund request, disbursement, ledger and audit workflow for the TRH finance desk.
"""

__version__ = "1.0.0"
