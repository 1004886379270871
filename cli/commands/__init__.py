"""
BitBadges Toolkit CLI Commands Package

Command modules for the bbtk command line interface.
"""

__all__ = ['address', 'token', 'validate', 'ledger', 'config']
