"""Deck generation: outline request, art direction and the per-slide image loop."""
