"""Taskboard API: multi-tenant task board backend (filters and drag-and-drop reordering)."""
