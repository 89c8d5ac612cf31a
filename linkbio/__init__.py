"""linkbio - link-in-bio profiles, ordered link collections and profile analytics."""

__version__ = "0.1.0"
