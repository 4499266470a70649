"""Personal profile API: profile, skills, projects and work history.

This package holds the DB models, the search pipeline and the HTTP routers
served by the FastAPI app in ``me_api.api``.
"""
