"""Hosting-platform integrations.

The drafter talks to the platform only through GitHubPlatformProtocol,
so the real httpx client and the in-memory fake are interchangeable.
"""
