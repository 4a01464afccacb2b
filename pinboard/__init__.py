"""Pinboard: a social photo-sharing web application."""
