"""Input/output tools of the analysis tasks."""
