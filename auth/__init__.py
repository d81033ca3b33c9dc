"""
Authentication package for the Flask app.

This package implements the OAuth2 Authorization Code Flow with PKCE against a
Laravel Passport server, plus a request-time guard that validates and silently
refreshes the access token stored in the `oauth_data` cookie.
"""
