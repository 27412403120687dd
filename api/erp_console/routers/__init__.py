# erp_console/routers/__init__.py
