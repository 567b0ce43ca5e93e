"""Template rendering and the default content generator."""
