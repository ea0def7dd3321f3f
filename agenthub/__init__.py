"""
AgentHub Backend.

Core components:
- api: FastAPI app, routes and wire schemas
- services: question store, application submission, inbox feed
- tools: email dispatch
- db: SQLAlchemy models and session management
"""
