"""Background worker for the weekly snapshot roller."""
