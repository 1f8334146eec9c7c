"""Infrastructure — database sessions, logging, and the in-process token adapter."""
