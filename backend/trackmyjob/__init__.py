"""TrackMyJob backend."""
