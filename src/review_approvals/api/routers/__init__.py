"""
review_approvals.api.routers

HTTP routers.
"""

# Package marker.
