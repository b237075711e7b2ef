"""Generate Swagger documentation from serverless function config and TypeScript types."""
