"""
repositories/ - Data Access Layer
==================================
The repository owns the session and exposes the catalog operations.
It receives documents from the db layer and returns domain model objects;
callers never see raw documents or driver exceptions.
"""
