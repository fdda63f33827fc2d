"""Library Desk - Core Application Package

This package contains the core modules of the lending desk:
- Entities (book.py, user.py)
- Entity store (library.py)
- Borrow policies (policies.py)
- Lending rules (lending.py)
- CSV ingestion (loader.py)
- Interactive menu (shell.py)
"""
