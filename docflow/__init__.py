"""Docflow: conversation and workflow orchestration for document authoring.

Drives multi-turn authoring conversations between a user and a set of
phase-specific agents, and tracks progress through the fixed
prd -> requirements -> design -> implementation workflow.
"""

__version__ = "0.1.0"
