"""Payroll kernel domain value objects (pure, zero I/O)."""
