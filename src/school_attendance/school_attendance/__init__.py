"""School Attendance package.

This package is organized by feature modules (users, students, attendance,
grades, logs, reports) with a thin Flask JSON controller layer on top of
service/repository layers.
"""
