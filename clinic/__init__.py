"""
Clinic Scheduling Service

A FastAPI-based service for booking doctor appointments against weekly
schedules and time off, and for recording the treatments given at each visit.
"""

__version__ = "1.0.0"
