"""Schema-driven HTML field extraction with typed coercion and optional LLM formatting."""

__all__ = [
    "models",
    "normalizer",
    "validation",
    "document",
    "extractor",
    "coercion",
    "output",
    "schema_loader",
    "config",
    "fetcher",
    "llm",
    "prompts",
    "formatter",
    "cli",
]

__version__ = "0.1.0"
