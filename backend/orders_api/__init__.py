"""
Restaurant orders REST API.
"""
