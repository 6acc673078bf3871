"""
Backend package for the rental portfolio and tax tracker.

This package provides a FastAPI application over a relational store, plus a
document store path that writes to Firestore while online and to local JSON
blobs while offline.
"""
