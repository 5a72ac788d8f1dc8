"""Airbnb search results and reviews scraper.

Crawls search pages for each keyword through the ScrapeOps proxy, writes the
listings to CSV, then visits every listing and writes its reviews to a CSV
file of its own.
"""

__version__ = "0.1.0"
