"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from workforce.api.v1.endpoints import (auth, health, leave_requests,
                                        projects, time_entries, users)

api_router = APIRouter()

# Auth (register, login, refresh, own profile, admin user creation)
api_router.include_router(auth.router)

# User directory
api_router.include_router(users.router)

# Clock in / clock out
api_router.include_router(time_entries.router)

# Leave requests and their review
api_router.include_router(leave_requests.router)

# Projects and tasks
api_router.include_router(projects.router)

# Health, status
api_router.include_router(health.router)
