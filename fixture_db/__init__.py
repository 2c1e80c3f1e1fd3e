"""
Local fixture database generator.

Builds a fresh SQLite file for development on every run:
- declarative table schema compiled to DDL
- fixed currency seed catalog
- optional sample accounts (``--fixtures``)
"""
