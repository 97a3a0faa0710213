"""
Scheduling Engine

Pure availability logic, evaluated against snapshots loaded by the services:
- Interval overlap tests (overlap.py)
- Working-hours and conflict checks (availability.py)
- Free slot enumeration (slots.py)
"""
