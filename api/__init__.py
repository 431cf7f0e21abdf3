"""
Web layer for the Book Shelf application.

This package provides:
- The application factory and exception handlers
- The routing table for shelf, genre and health pages
- The shelf request handler
- Jinja2 templates for the server-rendered pages
"""
