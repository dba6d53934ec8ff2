"""StretchCat — a work/break interval timer driven by time windows and focus modes."""
