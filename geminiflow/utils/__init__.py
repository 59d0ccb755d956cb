from .duration import format_duration
from .utils import format_value, generate_uuid, is_called_from_async_context
