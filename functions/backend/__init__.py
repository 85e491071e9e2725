"""
Backend package for the Skillync API.

This package provides a FastAPI application over a document store
abstraction (Firestore, SQLAlchemy or in-memory) so the web client can
reach profiles, the collaboration board and the AI flows through one
long-running service.
"""
