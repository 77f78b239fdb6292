"""Chat API routes."""
from fastapi import APIRouter, HTTPException, Depends
from src.api.dependencies import get_support_agent
from src.api.schemas import ChatRequest, ChatResponse, HistoryRequest, HistoryResponse
from src.agent.support_agent import (
    ContextUnavailableError,
    MessagePersistenceError,
    SupportAgent,
    UserResolutionError,
)
from src.analytics.logger import logger
from src.memory.conversation_store import conversation_store

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/ai-chat", response_model=ChatResponse)
async def ai_chat(request: ChatRequest, agent: SupportAgent = Depends(get_support_agent)):
    """Answer a customer message and return both stored messages."""
    if not request.user_id or not request.message:
        logger.warning("Chat request missing userId or message")
        raise HTTPException(status_code=400, detail="Missing required fields: userId and message")

    logger.info(f"Chat request from {request.user_id}: {request.message[:100]}")

    try:
        result = await agent.process_message(
            user_id=request.user_id,
            message=request.message,
            user_name=request.user_name,
            user_email=request.user_email,
        )
        return ChatResponse(**result)
    except (UserResolutionError, ContextUnavailableError, MessagePersistenceError) as e:
        logger.error(f"Chat request failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except ValueError as e:
        logger.warning(f"Validation error in chat endpoint: {e}")
        raise HTTPException(status_code=400, detail=f"Invalid request: {str(e)}")
    except Exception as e:
        logger.error(f"Error in ai-chat endpoint: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/chat/history", response_model=HistoryResponse)
async def chat_history(request: HistoryRequest):
    """Stored messages for a user, oldest first."""
    if not request.user_id:
        raise HTTPException(status_code=400, detail="Missing required field: userId")

    history = await conversation_store.get_chat_history(request.user_id, request.limit)
    return HistoryResponse(chat_history=history)
