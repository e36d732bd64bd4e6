"""Fleet simulation state engine."""
