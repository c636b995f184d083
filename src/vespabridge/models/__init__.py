"""Data models shared by the translation core and the HTTP actions."""
