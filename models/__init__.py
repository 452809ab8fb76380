"""
Models package exports.
"""
from models.api_models import Message, ChatRequest, TitleRequest
from models.chat_models import ChatMode, QuotaDecision, GenerationResult

__all__ = [
    'Message',
    'ChatRequest',
    'TitleRequest',
    'ChatMode',
    'QuotaDecision',
    'GenerationResult'
]
