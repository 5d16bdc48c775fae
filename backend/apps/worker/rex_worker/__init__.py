"""
Rex background worker.

arq worker running feed-cache maintenance jobs enqueued by the API.
"""

__version__ = "0.1.0"
