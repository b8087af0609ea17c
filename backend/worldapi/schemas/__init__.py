"""
Pydantic request/response schemas (the API contract).

Schemas are separate from the ORM models: the JSON field names are camelCase
and absent values are omitted, while the database columns keep their own
names.
"""
