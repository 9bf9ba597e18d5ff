"""School admin workbench package.

This package is organized by feature modules (attendance, assessments, ...)
with a thin Flask controller layer over service/repository layers that talk
to the school REST API.
"""
