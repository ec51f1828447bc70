"""
Backend package for the Tech Council website.

This package provides a FastAPI application with storage and database
abstractions so the same content can live in local JSON files, Vercel Blob,
Firebase Storage or Postgres depending on the deployment.
"""
