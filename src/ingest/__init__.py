"""
Ingestion components for ReviewPulse.

Turns review exports into canonical review data:
- Review Extractor
- Time Window Filter
- Review Merger
- Comment normalization, statistics and analysis payloads
"""
