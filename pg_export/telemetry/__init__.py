from .metrics import Metrics, pct_summary

__all__ = ["Metrics", "pct_summary"]
