# chat route consumed by the portfolio widget

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from portfolio_assistant.common.logging.logger import logger
from portfolio_assistant.config.cors import CORS_HEADERS
# dependencies
from portfolio_assistant.core.dependencies import get_chat_handler
from portfolio_assistant.chat_service.handler import ChatHandler
from portfolio_assistant.chat_service.errors import ChatServiceError, InvalidMessageError

# response models
from portfolio_assistant.api.response_models.chat import ChatResponse, ChatErrorResponse

router = APIRouter(prefix="/api", tags=["Chat"])

def _json(content: dict, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    # every chat response carries the same cross-origin headers
    return JSONResponse(content=content, status_code=status_code, headers=dict(CORS_HEADERS))

@router.options("/chat", status_code=status.HTTP_204_NO_CONTENT)
async def chat_preflight() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=dict(CORS_HEADERS))

@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ChatErrorResponse}, 500: {"model": ChatErrorResponse}},
)
async def chat(
    request: Request,
    chat_handler: ChatHandler = Depends(get_chat_handler),
):
    """
    Answers one widget message from the portfolio knowledge table.
    Body: {"message": str, "conversationHistory"?: [{"role": "user" | "assistant", "content": str}]}
    """
    try:
        try:
            payload = await request.json()
        except ValueError:
            raise InvalidMessageError("Invalid JSON body.")

        answer = await chat_handler.handle(payload)

    except ChatServiceError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(f"Chat request failed ({e.status_code}): {e.message}")
        return _json(e.to_envelope(), status_code=e.status_code)
    except Exception as e:
        # outermost safety net, staged errors are handled above
        logger.exception(f"Unexpected error while handling chat request: {e}")
        return _json(
            ChatErrorResponse(error="Server error", details=str(e)).model_dump(),
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return _json(ChatResponse(response=answer).model_dump())
