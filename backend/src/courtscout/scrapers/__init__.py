"""Scraping layer for the ITEC self-service booking site."""

from courtscout.scrapers.itec import ITECClient
from courtscout.scrapers.models import Session, TimeSlot
from courtscout.scrapers.parser import parse_availability, parse_time_slots

__all__ = [
    "ITECClient",
    "Session",
    "TimeSlot",
    "parse_availability",
    "parse_time_slots",
]
