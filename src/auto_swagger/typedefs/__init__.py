"""Type definition conversion into Swagger schema definitions."""
