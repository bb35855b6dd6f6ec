"""Domain services and external integrations."""

from adaptive_chat.services.pdf_processor import pdf_processor
from adaptive_chat.services.model_gateway import model_gateway

__all__ = ["pdf_processor", "model_gateway"]
