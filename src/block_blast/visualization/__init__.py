"""Pygame frontend for Block Blast."""
