"""In-memory submission storage."""
