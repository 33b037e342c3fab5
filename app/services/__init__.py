"""
Services Package

This package contains the query layer, kept separate from HTTP handling
(routers) so it can be tested against a plain Session.

Current services:
- books.py: One SQL statement per book CRUD operation
"""
