"""
db/ - Database Layer
====================
Handles the MongoDB session, index setup, the document schema and the
translation of search criteria into filter documents.
This layer only depends on the domain models, never on repositories.
"""
