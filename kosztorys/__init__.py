"""Core package for the tree-care cost estimate (kosztorys) engine."""

__version__ = "1.0.0"

__all__ = [
    "config",
    "models",
    "options",
    "schedule",
    "headers",
    "merger",
    "classifier",
    "filters",
    "codes",
    "pricing",
    "pipeline",
    "editing",
    "report",
    "runtime",
    "formatting",
    "cli",
    "app",
]
