"""
Services module for business logic separation.

This module contains the service classes that encapsulate business logic,
keeping it separate from API endpoints and database models.
"""
