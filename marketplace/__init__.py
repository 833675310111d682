"""Classifieds marketplace backend (users, ads, vacancies, companies, real estate)."""

from marketplace.app import create_app

__all__ = ["create_app"]
