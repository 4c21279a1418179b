"""
Lexicon Lengthen: spaced-repetition scheduling for vocabulary learning.

Packages:
- lexicon.srs: SM-2 engine, sessions, statistics, practice trackers
- lexicon.points: point formulas and point-value providers
- lexicon.progress: streaks and learner totals
- lexicon.store: SQLite reference record store for the CLI
- lexicon.cli: terminal front end
"""

__version__ = "1.0.0"
