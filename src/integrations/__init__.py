"""
Integrations for external services and APIs.

This package contains the outbound HTTP clients for GitHub (commit status
lookups) and Misskey (note creation).
"""
