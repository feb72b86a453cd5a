"""Utilities package for the chart engine"""

from dashgraph.utils.date_bucket import create_date, to_datetime

__all__ = ['create_date', 'to_datetime']
