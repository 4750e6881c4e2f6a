"""Workflow phases, completion evaluation and transitions."""
