"""School Attendance package.

Feature modules (people, attendance, nutrition) each own their models,
repositories and services; Flask controllers stay thin on top of them.
"""
