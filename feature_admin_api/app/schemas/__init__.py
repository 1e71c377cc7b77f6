"""
Pydantic schema definitions for API payloads.

Schemas are shared between the repository (as the stored record type)
and the API layer (as request and response bodies).
"""
