"""
Schemas module - API request/response contracts.

Difference from models:
- Models: stored records returned by IStorage
- Schemas: what the client sends and receives
"""
