"""Bulk provisioning of spreadsheet contacts into Genesys Cloud users."""

__version__ = "0.1.0"
