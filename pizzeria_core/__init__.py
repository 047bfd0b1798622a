"""
Pizzeria core REST API for pizza orders

The package exposes a versioned HTTP resource API for orders with
optimistic concurrency control based on entity tags (ETags) and the
conditional request headers ``If-Match`` and ``If-None-Match``.
"""

__version__ = "0.1.0"
