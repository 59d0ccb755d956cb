from datetime import datetime


def format_duration(start: datetime, end: datetime) -> str:
    """
    Render the time between `start` and `end` for log lines.

    Examples:
        >>> from datetime import timedelta
        >>> start = datetime(2024, 1, 1)
        >>> format_duration(start, start + timedelta(milliseconds=250))
        '250ms'
        >>> format_duration(start, start + timedelta(seconds=90))
        '1.5m'
    """
    seconds = (end - start).total_seconds()
    if seconds < 1:
        return f"{seconds * 1000:.0f}ms"
    if seconds < 60:
        return f"{round(seconds, 1)}s"
    if seconds < 3600:
        return f"{round(seconds / 60, 1)}m"
    return f"{round(seconds / 3600, 1)}h"
