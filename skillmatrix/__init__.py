"""Skill matrix directory service: members, projects, groups, skills and specialties."""

__version__ = "1.0.0"
