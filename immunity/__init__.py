"""
Immunity - Turn-Based Immune System Card Battle Engine

A deterministic, event-driven engine for a single-player card battle in which
the player's immune system fights a queue of pathogens. The engine provides:
- Turn phase state machine (player turn, pathogen turn, game over)
- Defense-aware damage and healing
- Pathogen ability scheduling and attack cadence
- Two-pass card resolution with combo partners
- Player policies, sessions and an HTTP API for automated play
"""

__version__ = "0.1.0"
