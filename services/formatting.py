"""Human-readable countdowns for reminder lists."""


def format_countdown(seconds: float) -> str:
    """Format a remaining duration as ``HH:MM:SS`` or ``N day(s), HH:MM:SS``.

    Zero or negative durations read "Done!".
    """
    if seconds <= 0:
        return "Done!"
    total = int(seconds)
    days, remainder = divmod(total, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)
    clock = f"{hours:02d}:{minutes:02d}:{secs:02d}"
    if days > 0:
        return f"{days} day(s), {clock}"
    return clock
