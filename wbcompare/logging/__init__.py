"""Application logging and the findings log."""
