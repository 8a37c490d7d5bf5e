"""Digitization Portal package.

This package is organized by feature modules (catalog, attendance, payroll, ...)
with a thin Flask controller layer and service/repository layers.
"""
