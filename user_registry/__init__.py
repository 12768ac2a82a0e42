"""User registry -- user signup backend built on DDD building blocks."""

__version__ = "1.0.0"
