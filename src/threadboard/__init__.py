"""Threadboard: threaded discussion forum service."""
