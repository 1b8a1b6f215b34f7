"""Infrastructure: persistence, channel providers, engine composition."""
