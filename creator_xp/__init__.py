"""Creator XP: XP, levels, streaks and achievements for content creators"""

__version__ = "0.1.0"
