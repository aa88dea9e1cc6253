"""Data core for the marketing/crypto analytics dashboard."""
