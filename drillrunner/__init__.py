"""Run, verify and track progress through a course of small programming exercises."""

__version__ = "5.2.1"