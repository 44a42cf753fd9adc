"""Pre-written diagnosis narratives."""

from clinassess.narratives.selector import diagnosis_text, get_narrative, lookup, render

__all__ = ["diagnosis_text", "get_narrative", "lookup", "render"]
