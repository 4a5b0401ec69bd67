"""Framework-level building blocks shared by every feature."""
