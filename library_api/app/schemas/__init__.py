"""
Pydantic schema definitions for API payloads.

Each domain (books, authors, patrons, loans) defines its own Pydantic
models for request and response bodies.  Schemas are separated from
the database rows to decouple API representation from persistence.
"""
