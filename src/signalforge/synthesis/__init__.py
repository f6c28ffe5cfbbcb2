"""Rendering of run digests for language-model consumption."""

from signalforge.synthesis.context_block import build_context_block

__all__ = ["build_context_block"]
