from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """
    Liveness probe. Also reports whether the shared Rocket.Chat session
    currently holds a token, which is informational only: a missing token
    is refreshed by the next webhook call.
    """
    client = getattr(request.app.state, "rocketchat_client", None)
    authenticated = bool(client and client.session.is_authenticated)
    return {"status": "healthy", "rocketchat_authenticated": authenticated}
