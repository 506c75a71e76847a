"""Student Records package.

This package is organized by feature modules (students, attendance, reports, ...)
with a thin Flask controller layer over a single in-process record store.
"""
