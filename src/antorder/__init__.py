"""antorder: detect Spring Security URL patterns declared in the wrong order."""

__version__ = "0.1.0"
