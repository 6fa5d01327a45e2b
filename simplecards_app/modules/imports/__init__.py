"""Bulk module import: Quizlet scraping, CSV parsing and the background jobs."""
