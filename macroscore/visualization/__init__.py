"""Charts and dashboard."""
from .charts import ScoreCharts

__all__ = ['ScoreCharts']
