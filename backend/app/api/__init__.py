"""API Layer — FastAPI routes, dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON bodies; errors are {"error": message}

Design Decisions:
    - Thin routes delegate to the repository (ADR: impureim sandwich)
"""
