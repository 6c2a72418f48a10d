"""Taskline: collaborative task tracking with a transactional task lifecycle engine."""
