"""FastAPI application module for Vibely.

This module contains the FastAPI application factory, route handlers, and
middleware for the recommendation service.
"""
