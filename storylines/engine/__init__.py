"""Storyline engine — greedy, explainable sequencing of anecdotes."""

from storylines.engine.assembler import generate_storylines, storylines_signature

__all__ = ["generate_storylines", "storylines_signature"]
