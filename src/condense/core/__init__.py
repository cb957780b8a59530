"""Core pipeline components for condense."""
