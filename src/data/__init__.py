"""
Data collaborators: replay feed, observation persistence, CSV import.

Depends on sim_core.contracts for DataEvent; no dependency from sim_core back to data.
"""

from data.csv_import import CSVFormatError, read_observations
from data.feed import HistoricFeed
from data.observation_store import ObservationStore

__all__ = [
    "CSVFormatError",
    "HistoricFeed",
    "ObservationStore",
    "read_observations",
]
