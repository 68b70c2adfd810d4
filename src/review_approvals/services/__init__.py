"""
review_approvals.services

Service-layer package.

Responsibilities:
- Own transaction boundaries and persistence decisions.
- Compose repositories and the approvals utility into change workflows.
"""

# Package marker.
