"""
Pizzeria core REST API

Use ``pizzeria_core.api.api:api.app`` as the application
import string for ASGI servers like ``uvicorn``.
"""
