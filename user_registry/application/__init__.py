"""Application layer -- use cases, commands, request context, event bus."""
