"""Incident service contract — canonical data structures shared by all modules."""

from src.contracts.alert import Acknowledger, Alert, AlertPage, User
from src.contracts.enums import IncidentStatus
from src.contracts.rule import Rule, WorkItem

__all__ = ["Acknowledger", "Alert", "AlertPage", "IncidentStatus", "Rule", "User", "WorkItem"]
