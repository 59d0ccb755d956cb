from .gemini import GeminiInputSchema, GeminiNode
from .models import list_models
from .text import generate_text
