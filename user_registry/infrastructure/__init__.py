"""Infrastructure layer -- configuration, logging, persistence adapters."""
