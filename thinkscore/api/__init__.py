"""
ThinkScore REST API.

Provides:
- POST /evaluations - LLM answer evaluation
- GET /rankings/* - Leaderboards, personal rank and stats
- GET /usage-logs/* - LLM usage logs and statistics
- Questions, answers, scores, profiles and forum CRUD
- GET /health - Service health check
"""

from thinkscore.api.app import create_app

__all__ = ["create_app"]
