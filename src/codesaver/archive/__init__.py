"""Archive assembly and download handoff."""
