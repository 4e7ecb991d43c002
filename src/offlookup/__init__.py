"""offlookup: HTTP lookup service over an Open Food Facts product database."""

__version__ = "1.0.0"
