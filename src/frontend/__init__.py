"""Front-end pipeline glue for parsing and export analysis."""

from .candidates import Candidate, collect_candidates
from .pipeline import FrontEndResult, run_frontend

__all__ = ["Candidate", "FrontEndResult", "collect_candidates", "run_frontend"]
