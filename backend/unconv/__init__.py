"""Application package for the Unconv CRUD backend.

This package exposes the service, repository and model modules used by
the FastAPI application in `unconv.main`. Individual modules contain the
concrete implementations and documentation.
"""
