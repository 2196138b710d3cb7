"""Analysis tools for configurations of patchy colloidal particles."""

__version__ = "0.1.0"

__all__ = [
    "model",
    "statistics",
    "clusters",
    "output",
    "relaxation",
    "reactions",
    "autocorrelation",
    "breakage",
    "breakage_report",
]