"""Git branch switcher.

Features:
- List the most recently committed-to local branches
- Pick one from an interactive menu
- Offer to stash uncommitted changes before switching
"""

__version__ = "0.1.0"
