"""
Risk Assessment Service - Credit Risk Scoring & Explainability

A FastAPI-based microservice that scores loan/credit applicants against
configured risk models, classifies them into risk tiers, and explains
which applicant attributes drove each score.
"""

__version__ = "0.1.0"
