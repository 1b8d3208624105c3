"""HTTP layer: static assets and the contact API."""
