"""Authoring, curation and lifecycle core for video-analytics detection tasks."""
