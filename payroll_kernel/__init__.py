"""
Payroll Kernel

Shared primitives for the payroll toolkit:
- Structured JSON logging with context propagation
- Typed exception hierarchy with machine-readable codes
- Workflow value objects for document lifecycles
- Whole-unit rounding and INR display formatting
"""

__version__ = "0.1.0"
