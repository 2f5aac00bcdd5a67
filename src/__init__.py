"""Tubeshelf: YouTube channel and playlist organizer."""
