"""EduTracker backend package.

Feature modules (attendance, assessments, archive, ...) follow the same
layout: a plain domain model, a repository Protocol with a MySQL
implementation, a service holding the use cases and a thin Flask
controller.
"""
