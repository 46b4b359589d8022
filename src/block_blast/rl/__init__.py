"""Reinforcement-learning agents for Block Blast."""
