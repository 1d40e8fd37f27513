"""Main entry point for the Stripe onboarding assistant API."""
import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from config import CORS_ORIGINS, FLOW_POLICY, LOG_FORMAT, LOG_LEVEL, PORT
from logger import setup_logging
from models.api import ChatRequest, ChatResponse, SessionStatus
from models.catalog import QUESTIONS
from services.completion_adapter import CompletionAdapter
from services.conversation_manager import ConversationManager
from services.flow_controller import FlowController
from services.flow_prompts import FlowPolicy
from services.view_bridge import TurnInProgressError, ViewBridge

if LOG_FORMAT == "json":
    setup_logging(LOG_LEVEL)

# Initialize logging
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"

# Initialize FastAPI app
app = FastAPI(
    title="Stripe Onboarding Assistant",
    description="Guided chat that walks a user through setting up a Stripe platform integration",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize services (will be done on startup)
flow_controller: FlowController = None
conversation_manager: ConversationManager = None
view_bridge: ViewBridge = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global flow_controller, conversation_manager, view_bridge

    logger.info("Initializing onboarding assistant services...")

    try:
        completion_adapter = CompletionAdapter()
        logger.info("Initialized CompletionAdapter")

        flow_controller = FlowController(completion_adapter, policy=FlowPolicy(FLOW_POLICY))
        logger.info("Initialized FlowController")

        conversation_manager = ConversationManager(flow_controller.new_state)
        logger.info("Initialized ConversationManager")

        view_bridge = ViewBridge(flow_controller, conversation_manager)
        logger.info("All services initialized successfully")
    except Exception as e:
        logger.error(f"Failed to initialize services: {e}", exc_info=True)
        raise


@app.get("/")
async def root():
    """Serve the chat widget."""
    return FileResponse(STATIC_DIR / "index.html", media_type="text/html")


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "stripe-onboarding-assistant",
        "version": "1.0.0"
    }


@app.post("/chat", response_model=ChatResponse)
def chat_endpoint(request: ChatRequest) -> ChatResponse:
    """
    Run one turn of the onboarding conversation.

    An empty message returns the opening question. A session ID is created
    on the first call and must be sent back on later calls.

    Args:
        request: ChatRequest with message, optional session_id and optional tagged intent

    Returns:
        ChatResponse with the content and suggested responses to render

    Raises:
        HTTPException: 409 if the session already has a turn in flight
    """
    try:
        payload = view_bridge.submit_text(
            session_id=request.session_id,
            text=request.message,
            intent=request.intent,
            section=request.section,
        )
    except TurnInProgressError as e:
        raise HTTPException(
            status_code=409,
            detail={
                "error": {
                    "code": "TURN_IN_PROGRESS",
                    "message": "Please wait for the previous message to finish.",
                    "details": {"session_id": e.session_id}
                }
            }
        )
    except Exception as e:
        logger.error(f"Unexpected error processing chat turn: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error")

    return ChatResponse(
        content=payload.content,
        suggested_responses=payload.suggested_responses,
        error=payload.error,
        session_id=payload.session_id,
        question_index=payload.question_index,
        complete=payload.complete,
    )


@app.get("/sessions/{session_id}", response_model=SessionStatus)
async def session_status(session_id: str) -> SessionStatus:
    """Report how far a session has progressed."""
    session = conversation_manager.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")

    state = session.state
    answers = {
        question.section: state.answers[question.id]
        for question in QUESTIONS
        if question.id in state.answers
    }
    return SessionStatus(
        session_id=session.session_id,
        question_index=state.current_question_index,
        complete=state.is_complete,
        answers=answers,
    )


if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting onboarding assistant API on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
