"""Payroll business modules built on the kernel and engines."""
