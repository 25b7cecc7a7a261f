"""Relay new liveuamap.com articles to a chat webhook."""
