"""ASO keyword combination engine."""
