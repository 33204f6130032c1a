"""Property marketplace API."""
