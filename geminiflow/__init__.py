from geminiflow.connections import Gemini as GeminiConnection
from geminiflow.nodes.gemini import GeminiNode
from geminiflow.runnables import RunnableConfig, RunnableResult, RunnableStatus
