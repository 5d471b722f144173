"""
Top‑level router for version 1 of the API.

This router aggregates the domain routers under a unified prefix.
When new domains are introduced, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import audit, authors, books, loans, patrons

router = APIRouter()

router.include_router(books.router, prefix="/books", tags=["books"])
router.include_router(authors.router, prefix="/authors", tags=["authors"])
router.include_router(patrons.router, prefix="/patrons", tags=["patrons"])
# Borrow and return live under /patrons/{patron_id}/books/{book_id}/...;
# the loans router spells out the full path itself.
router.include_router(loans.router, tags=["loans"])
router.include_router(audit.router, prefix="/audit", tags=["audit"])
