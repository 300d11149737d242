"""Release Drafter.

A GitHub webhook service that publishes a release note for every new
tag, listing the commits introduced since the previous release, and
thanks reporters of newly opened issues.
"""

__version__ = "0.1.0"
