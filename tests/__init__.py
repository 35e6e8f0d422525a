# FILE: tests/__init__.py
