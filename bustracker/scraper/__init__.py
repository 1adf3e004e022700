"""Scraper package — tracker page fetch & ETA extraction."""

from bustracker.scraper.extractor import EtaExtractor, extract_eta
from bustracker.scraper.fetcher import Transport, build_eta_url, fetch_url
from bustracker.scraper.models import ExtractionOutcome, OutcomeKind, RawPage

__all__ = [
    "fetch_url",
    "build_eta_url",
    "Transport",
    "EtaExtractor",
    "extract_eta",
    "ExtractionOutcome",
    "OutcomeKind",
    "RawPage",
]
