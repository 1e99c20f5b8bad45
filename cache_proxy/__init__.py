"""
Unified Cache Proxy

Reverse proxy in front of Claude, Codex and Gemini style completion APIs that
normalizes requests so upstream prompt caching stays effective.
"""

__version__ = "0.1.0"
