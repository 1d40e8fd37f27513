"""Services for the Stripe onboarding assistant."""
from .completion_adapter import CompletionAdapter, Completion, ServiceError, ServiceErrorInfo
from .intent_parser import IntentParser
from .flow_prompts import FlowPolicy
from .flow_controller import FlowController, FlowResponse
from .conversation_manager import ConversationManager, Session
from .view_bridge import ViewBridge, RenderPayload, TurnInProgressError

__all__ = ['CompletionAdapter', 'Completion', 'ServiceError', 'ServiceErrorInfo', 'IntentParser', 'FlowPolicy', 'FlowController', 'FlowResponse', 'ConversationManager', 'Session', 'ViewBridge', 'RenderPayload', 'TurnInProgressError']
