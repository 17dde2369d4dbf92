"""Scrape pipeline package."""

from policywatch.pipeline.orchestrator import ScrapeOrchestrator

__all__ = ["ScrapeOrchestrator"]
