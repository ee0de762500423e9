"""Request dependencies shared by the routers."""

from fastapi import HTTPException, Request

from tms.engine import TransportEngine


def get_engine(request: Request) -> TransportEngine:
    """The engine built by the application lifespan."""
    engine = getattr(request.app.state, "engine", None)
    if engine is None:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return engine
