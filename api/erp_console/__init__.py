# erp_console/__init__.py
"""ERP Console - FastAPI console service in front of the ERP backend."""
__version__ = "1.0.0"
