from .connections import GEMINI_API_HOST, BaseConnection, Gemini
