"""School Attendance package.

Organized by feature modules (attendance, reports, students, classes, ...)
with a thin Flask controller layer over service/repository layers.
"""
