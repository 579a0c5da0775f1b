"""Integrations with tools outside the memory bank (Roo-Code, Git hooks)."""
