"""
Shared configuration, logging setup and exceptions.
"""
