"""
Service layer.

Services hold business rules and translate persistence results into
domain errors; API handlers stay thin.
"""
