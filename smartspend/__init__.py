"""
SmartSpend - Source Package

A personal-finance assistant: receipt photos go in, an AI service
extracts structured records, and the app turns them into dashboards
and a conversational assistant.

DESIGN PRINCIPLES:
1. The record list is the single source of truth
2. Everything shown is derived from it on every read
3. External AI calls are collaborators, never owners of state
4. Fail visibly, recover by user action
"""

__version__ = "1.0.0"
__author__ = "SmartSpend Team"
