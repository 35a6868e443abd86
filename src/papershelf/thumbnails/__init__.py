"""First-page rendering and the thumbnail disk cache."""
