"""
Job description retrieval.
"""

from recruitcall.jobs.fetcher import ContentFetchError, JobDescriptionFetcher, extract_text

__all__ = ["ContentFetchError", "JobDescriptionFetcher", "extract_text"]
