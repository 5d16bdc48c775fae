"""
Rex API application.

FastAPI service exposing profiles, things, interactions, comments,
recommendations, the aggregated feed and share links.
"""

__version__ = "0.1.0"
