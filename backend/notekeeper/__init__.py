"""Notekeeper - private notes with optional images, stored locally per user."""
