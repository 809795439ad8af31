"""Runtime services shared by the stream implementations."""
