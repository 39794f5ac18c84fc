"""
REST API for managing posts.
"""
