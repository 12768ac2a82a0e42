"""Domain layer -- entities, value objects, events, ports."""
