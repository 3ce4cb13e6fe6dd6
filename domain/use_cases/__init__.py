from .compute_metrics import compute_metrics

__all__ = ["compute_metrics"]
