"""
ridescore Worker

Performance rating and scoring engine for ride telemetry and race results:
- Six skill axes, overall rating, tier and badges from ride records
- Route Difficulty Index from GPX routes
- GEN placement scores and federation-weighted race points

Scoring functions are pure; Celery tasks wrap them for the API services.
"""

# Delay Celery import to allow using the scoring modules without a broker
def get_celery_app():
    from .celery_app import app
    return app

__all__ = ['get_celery_app']
