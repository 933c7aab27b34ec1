"""
Backend package for the portfolio site.

This package provides a FastAPI application that stores uploaded media and
a single profile record as JSON documents next to the files, and relays
contact-form messages over SMTP.
"""
